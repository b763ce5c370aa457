# locations/admin.py

from django.contrib import admin

from locations.models import StoreLocation


@admin.register(StoreLocation)
class StoreLocationAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug", "city", "phone", "is_active")
    list_filter = ("is_active", "state")
    search_fields = ("name", "slug", "city", "address")
    readonly_fields = ("created_at", "updated_at")
