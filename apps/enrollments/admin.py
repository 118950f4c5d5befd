# ==========================================
# apps/enrollments/admin.py
# ==========================================

from django.contrib import admin
from apps.enrollments.models import Student, Enrollment


class EnrollmentInline(admin.TabularInline):
    """Inline admin for a student's enrollments."""
    model = Enrollment
    extra = 0
    fields = [
        'course',
        'status',
        'academic_status',
        'enrollment_date',
        'start_date',
        'enrollment_fee',
        'subscription_status',
        'subscription_cancel_at',
    ]


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    """Admin interface for Students."""

    list_display = ['name', 'student_id', 'email', 'phone', 'created_at']
    search_fields = ['name', 'student_id', 'email', 'phone']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [EnrollmentInline]


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    """
    Admin interface for Enrollments.

    Subscription and academic state shown here drive the payment report's
    expected amounts and period statuses.
    """

    list_display = [
        'student',
        'course',
        'status',
        'academic_status',
        'subscription_status',
        'enrollment_fee',
        'enrollment_date',
        'subscription_cancel_at',
    ]
    list_filter = ['status', 'academic_status', 'subscription_status', 'course']
    search_fields = ['student__name', 'student__student_id', 'course__name']
    raw_id_fields = ['student']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'enrollment_date'

    fieldsets = (
        ('Enrollment', {
            'fields': ('student', 'course', 'status', 'academic_status')
        }),
        ('Dates', {
            'fields': ('enrollment_date', 'start_date', 'end_date')
        }),
        ('Billing', {
            'fields': ('enrollment_fee', 'subscription_status', 'subscription_cancel_at')
        }),
        ('Notes', {
            'fields': ('notes',),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('student', 'course')
