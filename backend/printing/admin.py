from django.contrib import admin

from .models import PrintJob


@admin.register(PrintJob)
class PrintJobAdmin(admin.ModelAdmin):
    list_display = ("id", "kind", "channel", "printer", "order", "status", "created_at")
    list_filter = ("kind", "status", "printer")
    readonly_fields = ("body", "fingerprint")
