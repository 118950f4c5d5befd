from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    FAILED = 'failed', 'Failed'
    REFUNDED = 'refunded', 'Refunded'
    VOID = 'void', 'Void'


class BillingReason(models.TextChoices):
    SUBSCRIPTION_CREATE = 'subscription_create', 'Subscription Created'
    SUBSCRIPTION_CYCLE = 'subscription_cycle', 'Subscription Renewal'
    SUBSCRIPTION_UPDATE = 'subscription_update', 'Subscription Updated'
    MANUAL = 'manual', 'Manual'


class Order(models.Model):
    """Payment order covering one billing period of an enrollment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Unique human-readable reference
    order_number = models.CharField(
        max_length=64,
        unique=True,
        db_index=True,
        editable=False
    )

    student = models.ForeignKey(
        'enrollments.Student',
        on_delete=models.CASCADE,
        related_name='orders'
    )
    course = models.ForeignKey(
        'courses.Course',
        on_delete=models.CASCADE,
        related_name='orders'
    )
    enrollment = models.ForeignKey(
        'enrollments.Enrollment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )

    # Financial details
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    currency = models.CharField(max_length=3, default='MYR')

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING
    )
    billing_reason = models.CharField(
        max_length=30,
        choices=BillingReason.choices,
        default=BillingReason.MANUAL
    )

    # Billing period covered by this order
    period_start = models.DateField()
    period_end = models.DateField()

    paid_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        indexes = [
            models.Index(fields=['student', 'course', 'period_start'], name='order_student_course_idx'),
            models.Index(fields=['status', 'period_start'], name='order_status_period_idx'),
        ]
        ordering = ['period_start', 'created_at']

    def __str__(self):
        return f"{self.order_number} - {self.amount} {self.currency} ({self.status})"

    def save(self, *args, **kwargs):
        """Generate order number if not set."""
        if not self.order_number:
            self.order_number = self._generate_order_number()
        super().save(*args, **kwargs)

    def _generate_order_number(self):
        import secrets
        # Format: ORD-<short-uuid>-<4-digit-random>
        short_id = str(self.id)[:8].upper()
        random_suffix = secrets.randbelow(10000)
        return f"ORD-{short_id}-{random_suffix:04d}"

    def is_paid(self):
        return self.status == OrderStatus.PAID

    def is_pending(self):
        return self.status == OrderStatus.PENDING

    def mark_paid(self):
        """Mark order as paid."""
        from django.utils import timezone

        self.status = OrderStatus.PAID
        self.paid_at = timezone.now()
        self.save(update_fields=['status', 'paid_at', 'updated_at'])

    def mark_failed(self):
        """Mark order as failed."""
        self.status = OrderStatus.FAILED
        self.save(update_fields=['status', 'updated_at'])

    def get_period_description(self):
        return f"{self.period_start:%d %b %Y} - {self.period_end:%d %b %Y}"
