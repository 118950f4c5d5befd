# ==========================================
# apps/payments/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Order, OrderStatus


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin interface for payment Orders.

    Provides order management including:
    - Listing by billing period with colored status badges
    - Filtering by status, course, period
    - Bulk actions for marking orders paid or failed
    """

    list_display = [
        'order_number',
        'student',
        'course',
        'period_start',
        'period_end',
        'amount',
        'status_badge',
        'paid_at',
    ]
    list_filter = ['status', 'billing_reason', 'course', 'period_start']
    search_fields = ['order_number', 'student__name', 'student__student_id', 'course__name']
    raw_id_fields = ['student', 'enrollment']
    readonly_fields = ['order_number', 'paid_at', 'created_at', 'updated_at']
    date_hierarchy = 'period_start'
    actions = ['mark_as_paid', 'mark_as_failed']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('student', 'course')

    def status_badge(self, obj):
        """Display order status as colored badge."""
        colors = {
            OrderStatus.PENDING: ('#FEF3C7', '#92400E'),
            OrderStatus.PAID: ('#059669', 'white'),
            OrderStatus.FAILED: ('#DC2626', 'white'),
            OrderStatus.REFUNDED: ('#6B7280', 'white'),
            OrderStatus.VOID: ('#E5E7EB', '#374151'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    @admin.action(description='Mark selected orders as paid')
    def mark_as_paid(self, request, queryset):
        count = 0
        for order in queryset.exclude(status=OrderStatus.PAID):
            order.mark_paid()
            count += 1
        self.message_user(request, f'{count} order(s) marked as paid.')

    @admin.action(description='Mark selected orders as failed')
    def mark_as_failed(self, request, queryset):
        count = 0
        for order in queryset.filter(status=OrderStatus.PENDING):
            order.mark_failed()
            count += 1
        self.message_user(request, f'{count} order(s) marked as failed.')
