# exchanges/management/commands/audit_exchange_stock.py

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from exchanges.services.reconciliation import find_duplicate_exchange_adjustments


class Command(BaseCommand):
    help = "Report exchanges whose stock adjustments do not match their status (read-only)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Exit with an error when any finding is reported.",
        )

    def handle(self, *args, **options):
        findings = find_duplicate_exchange_adjustments()

        if not findings:
            self.stdout.write(self.style.SUCCESS("Exchange stock is consistent."))
            return

        for finding in findings:
            self.stdout.write(
                self.style.WARNING(
                    f"{finding.exchange_id} [{finding.status or 'missing'}] "
                    f"outgoing={finding.net_outgoing} returned={finding.net_returned}: "
                    f"{finding.problem}"
                )
            )

        summary = f"{len(findings)} exchange(s) need attention."
        if options.get("strict"):
            raise CommandError(summary)
        self.stdout.write(summary)
