from django.contrib import admin

from .models import KDSTicket, KDSTicketItem


class KDSTicketItemInline(admin.TabularInline):
    model = KDSTicketItem
    extra = 0


@admin.register(KDSTicket)
class KDSTicketAdmin(admin.ModelAdmin):
    list_display = ('id', 'order_number', 'channel', 'table_number', 'status', 'created_at')
    list_filter = ('channel', 'status')
    inlines = [KDSTicketItemInline]
