# inventory/admin.py

"""
Admin rules (audit-safe stock):

- Items and variations are ordinary master data.
- StockLevel is read-only here; quantities change through adjust_stock_level().
- StockAdjustment rows are immutable and cannot be added, edited or deleted.
"""

from __future__ import annotations

from django.contrib import admin

from inventory.models import InventoryItem, InventoryVariation, StockAdjustment, StockLevel


class InventoryVariationInline(admin.TabularInline):
    model = InventoryVariation
    extra = 0
    fields = ("name", "sku", "is_active")


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "sku")
    inlines = [InventoryVariationInline]


@admin.register(InventoryVariation)
class InventoryVariationAdmin(admin.ModelAdmin):
    list_display = ("sku", "name", "item", "is_active")
    list_filter = ("is_active",)
    search_fields = ("sku", "name", "item__name")
    autocomplete_fields = ("item",)


@admin.register(StockLevel)
class StockLevelAdmin(admin.ModelAdmin):
    list_display = ("variation", "location", "stock", "updated_at")
    list_filter = ("location",)
    search_fields = ("variation__sku", "variation__name")
    readonly_fields = ("variation", "location", "stock", "purchase_cost", "updated_at")

    def has_add_permission(self, request):
        return False


@admin.register(StockAdjustment)
class StockAdjustmentAdmin(admin.ModelAdmin):
    list_display = ("created_at", "variation", "location", "change_amount", "stock_after", "reason")
    list_filter = ("location",)
    search_fields = ("reason", "variation__sku")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
