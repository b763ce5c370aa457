# users/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import (
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    ROLE_MANAGER,
    ROLE_SALES,
    ROLE_TECHNICIAN,
    STAFF_ROLES,
)


@dataclass(frozen=True)
class SeedUserSpec:
    label: str
    role: str
    email: str
    first_name: str = ""
    last_name: str = ""


SEED_USERS = [
    SeedUserSpec("Admin", ROLE_ADMIN, "admin@example.com", "System", "Admin"),
    SeedUserSpec("Manager", ROLE_MANAGER, "manager@example.com", "Store", "Manager"),
    SeedUserSpec("Sales", ROLE_SALES, "sales@example.com", "Front", "Desk"),
    SeedUserSpec("Technician", ROLE_TECHNICIAN, "tech@example.com", "Bench", "Tech"),
    SeedUserSpec("Customer", ROLE_CUSTOMER, "customer@example.com", "Jane", "Doe"),
]


class Command(BaseCommand):
    help = "Seed one user per role (staff and a sample customer)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password for existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()

        created_count = 0
        updated_count = 0

        for seed in SEED_USERS:
            is_admin = seed.role == ROLE_ADMIN
            is_staff = seed.role in STAFF_ROLES

            user, created = User.objects.get_or_create(
                email=seed.email,
                defaults={
                    "role": seed.role,
                    "first_name": seed.first_name,
                    "last_name": seed.last_name,
                    "is_staff": is_staff,
                    "is_superuser": is_admin,
                    "is_active": True,
                },
            )

            dirty = created
            if user.role != seed.role:
                user.role = seed.role
                dirty = True
            if user.is_staff != is_staff or user.is_superuser != is_admin:
                user.is_staff = is_staff
                user.is_superuser = is_admin
                dirty = True

            if created or force_password:
                user.set_password(password)
                dirty = True

            if dirty:
                user.save()
                if not created:
                    updated_count += 1

            if created:
                created_count += 1
                self.stdout.write(f"created: {seed.label} ({seed.role}) -> {seed.email}")
            else:
                self.stdout.write(f"exists:  {seed.label} ({seed.role}) -> {seed.email}")

        self.stdout.write(self.style.SUCCESS(f"Created: {created_count}, updated: {updated_count}"))
