import pytest
from decimal import Decimal
from datetime import date
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.courses.models import Course, CourseFeeSettings, BillingCycle
from apps.enrollments.models import Enrollment, Student, SubscriptionStatus
from apps.payments.models import OrderStatus
from apps.reports.tests.factories import REPORT_YEAR, month_order


User = get_user_model()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def report_admin(db):
    """Create a back-office staff user."""
    return User.objects.create_user(
        username='bursar',
        email='bursar@example.com',
        password='TestPass123!',
        is_staff=True,
    )


@pytest.fixture
def report_user(db):
    """Create a user without staff access."""
    return User.objects.create_user(
        username='tutor',
        email='tutor@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def report_admin_client(report_admin):
    """Return API client authenticated as staff."""
    client = APIClient()
    refresh = RefreshToken.for_user(report_admin)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def report_user_client(report_user):
    """Return API client authenticated as a non-staff user."""
    client = APIClient()
    refresh = RefreshToken.for_user(report_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


# =============================================================================
# Courses
# =============================================================================

@pytest.fixture
def maths_course(db):
    """Monthly course at RM 80."""
    course = Course.objects.create(name='Mathematics')
    CourseFeeSettings.objects.create(
        course=course,
        billing_cycle=BillingCycle.MONTHLY,
        fee_amount=Decimal('80.00'),
    )
    return course


@pytest.fixture
def science_course(db):
    """Quarterly course at RM 240."""
    course = Course.objects.create(name='Science')
    CourseFeeSettings.objects.create(
        course=course,
        billing_cycle=BillingCycle.QUARTERLY,
        fee_amount=Decimal('240.00'),
    )
    return course


# =============================================================================
# Students and enrollments
# =============================================================================

@pytest.fixture
def alice(db):
    return Student.objects.create(student_id='S001', name='Alice Tan', email='alice@example.com')


@pytest.fixture
def bob(db):
    return Student.objects.create(student_id='S002', name='Bob Lim', email='bob@example.com')


@pytest.fixture
def carol(db):
    return Student.objects.create(student_id='S003', name='Carol Wong', email='carol@example.com')


@pytest.fixture
def dave(db):
    """Student with no enrollments."""
    return Student.objects.create(student_id='S004', name='Dave Kumar')


@pytest.fixture
def alice_enrollment(alice, maths_course):
    """Alice pays the course fee, enrolled before the report year."""
    return Enrollment.objects.create(
        student=alice,
        course=maths_course,
        enrollment_date=date(REPORT_YEAR - 1, 12, 1),
        subscription_status=SubscriptionStatus.ACTIVE,
    )


@pytest.fixture
def bob_enrollment(bob, maths_course):
    """Bob pays an RM 100 enrollment fee."""
    return Enrollment.objects.create(
        student=bob,
        course=maths_course,
        enrollment_date=date(REPORT_YEAR, 1, 1),
        enrollment_fee=Decimal('100.00'),
        subscription_status=SubscriptionStatus.ACTIVE,
    )


@pytest.fixture
def carol_enrollment(carol, science_course):
    return Enrollment.objects.create(
        student=carol,
        course=science_course,
        enrollment_date=date(REPORT_YEAR, 1, 1),
        subscription_status=SubscriptionStatus.ACTIVE,
    )


# =============================================================================
# Orders
# =============================================================================

@pytest.fixture
def alice_orders(alice, maths_course, alice_enrollment):
    """Alice paid every month of the report year."""
    return [
        month_order(alice, maths_course, month, '80.00', enrollment=alice_enrollment)
        for month in range(1, 13)
    ]


@pytest.fixture
def bob_orders(bob, maths_course, bob_enrollment):
    """Bob paid January, part of February, and has a pending April order."""
    return [
        month_order(bob, maths_course, 1, '100.00', enrollment=bob_enrollment),
        month_order(bob, maths_course, 2, '40.00', enrollment=bob_enrollment),
        month_order(bob, maths_course, 4, '100.00', status=OrderStatus.PENDING, enrollment=bob_enrollment),
    ]


@pytest.fixture
def report_data(alice_orders, bob_orders, carol_enrollment, dave):
    """Full data set: Alice paid up, Bob behind, Carol in Science, Dave unenrolled."""
    return {
        'alice_orders': alice_orders,
        'bob_orders': bob_orders,
        'carol_enrollment': carol_enrollment,
        'dave': dave,
    }
