from django.contrib import admin

from .models import KitchenZone, Printer


@admin.register(Printer)
class PrinterAdmin(admin.ModelAdmin):
    list_display = ("name", "printer_type", "ip_address", "is_active")
    list_filter = ("printer_type", "is_active")


@admin.register(KitchenZone)
class KitchenZoneAdmin(admin.ModelAdmin):
    list_display = ("name", "printer", "is_active")
    list_filter = ("is_active",)
