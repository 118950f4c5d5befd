# ==========================================
# apps/courses/admin.py
# ==========================================

from django.contrib import admin
from apps.courses.models import Course, CourseFeeSettings


class CourseFeeSettingsInline(admin.StackedInline):
    """Inline admin for the course's billing configuration."""
    model = CourseFeeSettings
    extra = 0
    max_num = 1
    fields = ['billing_cycle', 'fee_amount', 'currency']


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    """Admin interface for Courses."""

    list_display = ['name', 'status', 'get_billing_cycle', 'get_fee_amount', 'created_at']
    list_filter = ['status', 'fee_settings__billing_cycle']
    search_fields = ['name', 'description']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [CourseFeeSettingsInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('fee_settings')

    def get_billing_cycle(self, obj):
        fee_settings = obj.get_fee_settings()
        return fee_settings.get_billing_cycle_display() if fee_settings else '-'
    get_billing_cycle.short_description = 'Billing cycle'

    def get_fee_amount(self, obj):
        fee_settings = obj.get_fee_settings()
        return fee_settings.fee_amount if fee_settings else '-'
    get_fee_amount.short_description = 'Fee'


@admin.register(CourseFeeSettings)
class CourseFeeSettingsAdmin(admin.ModelAdmin):
    """Admin interface for Course Fee Settings."""

    list_display = ['course', 'billing_cycle', 'fee_amount', 'currency', 'updated_at']
    list_filter = ['billing_cycle', 'currency']
    search_fields = ['course__name']
    readonly_fields = ['created_at', 'updated_at']
