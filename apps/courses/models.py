# ==========================================
# apps/courses/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class CourseStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'


class BillingCycle(models.TextChoices):
    MONTHLY = 'monthly', 'Monthly'
    QUARTERLY = 'quarterly', 'Quarterly'
    YEARLY = 'yearly', 'Yearly'


class Course(models.Model):
    """Course offered by the tuition center."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=CourseStatus.choices, default=CourseStatus.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'courses'
        ordering = ['name']

    def __str__(self):
        return self.name

    def get_fee_settings(self):
        """Return fee settings or None when the course has none configured."""
        try:
            return self.fee_settings
        except CourseFeeSettings.DoesNotExist:
            return None


class CourseFeeSettings(models.Model):
    """Billing cycle and standard fee for a course."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    course = models.OneToOneField(Course, on_delete=models.CASCADE, related_name='fee_settings')
    billing_cycle = models.CharField(max_length=20, choices=BillingCycle.choices, default=BillingCycle.MONTHLY)
    fee_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    currency = models.CharField(max_length=3, default='MYR')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'course_fee_settings'
        verbose_name_plural = 'course fee settings'

    def __str__(self):
        return f"{self.course.name} - {self.fee_amount} {self.currency} ({self.billing_cycle})"
