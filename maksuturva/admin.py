from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("order_id", "payment_id", "status", "date_added", "date_updated")
    search_fields = ("order_id", "payment_id")
    list_filter = ("status", "date_added")
    readonly_fields = ("order_id", "payment_id", "date_added", "date_updated", "data_sent", "data_received")
    ordering = ("-date_added",)

    # Records are created at checkout and kept forever.
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        obj.update()
