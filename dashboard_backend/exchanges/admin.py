# exchanges/admin.py

from django.contrib import admin, messages

from exchanges.models import InventoryExchange
from exchanges.services import ExchangeServiceError, transition_exchange


# ======================================================
# EXCHANGE ADMIN
# ======================================================


@admin.register(InventoryExchange)
class InventoryExchangeAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "status",
        "customer",
        "returned_item",
        "new_item",
        "location",
        "processed_by",
        "exchanged_at",
    )
    # status only changes through the actions below
    readonly_fields = ("status", "created_at", "updated_at")
    # stock may already have moved for these once an exchange leaves Pending
    frozen_fields = (
        "customer",
        "returned_item",
        "returned_variation",
        "new_item",
        "new_variation",
        "processed_by",
        "location",
    )
    search_fields = ("id", "customer__email", "returned_item__name", "new_item__name")
    list_filter = ("status", "location", "exchanged_at")
    actions = ("approve_exchanges", "reject_exchanges")

    def get_readonly_fields(self, request, obj=None):
        readonly = tuple(super().get_readonly_fields(request, obj))
        if obj is not None and not obj.is_pending:
            readonly += self.frozen_fields
        return readonly

    def _transition(self, request, queryset, target_status):
        done = 0
        for exchange in queryset:
            try:
                result = transition_exchange(
                    exchange_id=exchange.pk,
                    target_status=target_status,
                    user=request.user,
                )
            except ExchangeServiceError as exc:
                self.message_user(request, f"{exchange.pk}: {exc}", level=messages.ERROR)
                continue
            done += int(result.changed)

        self.message_user(request, f"{done} exchange(s) {target_status.lower()}.")

    @admin.action(description="Approve selected exchanges (moves stock)")
    def approve_exchanges(self, request, queryset):
        self._transition(request, queryset, InventoryExchange.STATUS_APPROVED)

    @admin.action(description="Reject selected exchanges")
    def reject_exchanges(self, request, queryset):
        self._transition(request, queryset, InventoryExchange.STATUS_REJECTED)
