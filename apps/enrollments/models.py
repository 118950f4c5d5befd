# ==========================================
# apps/enrollments/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class EnrollmentStatus(models.TextChoices):
    ENROLLED = 'enrolled', 'Enrolled'
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    DROPPED = 'dropped', 'Dropped'
    PENDING = 'pending', 'Pending'


class AcademicStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    WITHDRAWN = 'withdrawn', 'Withdrawn'
    SUSPENDED = 'suspended', 'Suspended'


class SubscriptionStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    TRIALING = 'trialing', 'Trialing'
    PAST_DUE = 'past_due', 'Past Due'
    CANCELED = 'canceled', 'Canceled'
    UNPAID = 'unpaid', 'Unpaid'
    INCOMPLETE = 'incomplete', 'Incomplete'
    INCOMPLETE_EXPIRED = 'incomplete_expired', 'Incomplete Expired'


# Enrollment states the payment report treats as "currently enrolled"
REPORTABLE_ENROLLMENT_STATUSES = [EnrollmentStatus.ENROLLED, EnrollmentStatus.ACTIVE]


class Student(models.Model):
    """Student of the tuition center."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student_id = models.CharField(max_length=32, unique=True, db_index=True)
    name = models.CharField(max_length=200, db_index=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.student_id})"


class Enrollment(models.Model):
    """A student's enrollment in a course, with subscription and academic state."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='enrollments')
    course = models.ForeignKey('courses.Course', on_delete=models.CASCADE, related_name='enrollments')

    status = models.CharField(
        max_length=20,
        choices=EnrollmentStatus.choices,
        default=EnrollmentStatus.ENROLLED
    )
    academic_status = models.CharField(
        max_length=20,
        choices=AcademicStatus.choices,
        default=AcademicStatus.ACTIVE
    )

    enrollment_date = models.DateField(default=timezone.localdate)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    # Per-enrollment override of the course fee (discounts, promotions)
    enrollment_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    subscription_status = models.CharField(
        max_length=20,
        choices=SubscriptionStatus.choices,
        blank=True
    )
    subscription_cancel_at = models.DateField(null=True, blank=True)

    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'enrollments'
        unique_together = [['student', 'course']]
        indexes = [
            models.Index(fields=['course', 'status'], name='enrollment_course_status_idx'),
            models.Index(fields=['student', 'status'], name='enrollment_student_status_idx'),
        ]
        ordering = ['-enrollment_date', '-created_at']

    def __str__(self):
        return f"{self.student.name} - {self.course.name} ({self.status})"
