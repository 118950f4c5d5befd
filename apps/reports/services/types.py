"""Value types produced by the payment report engine."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Tuple

from django.db import models


ZERO = Decimal('0.00')


class PaymentCellStatus(models.TextChoices):
    """Classification of one (student, billing period) cell."""

    PAID = 'paid', 'Paid'
    PARTIAL_PAYMENT = 'partial_payment', 'Partial'
    UNPAID = 'unpaid', 'Unpaid'
    PENDING_PAYMENT = 'pending_payment', 'Pending Payment'
    NOT_STARTED = 'not_started', 'Not Started'
    NO_ENROLLMENT = 'no_enrollment', 'No Enrollment'
    CANCELLED_THIS_PERIOD = 'cancelled_this_period', 'Canceled'
    CANCELLED_BEFORE = 'cancelled_before', 'Previously Canceled'
    WITHDRAWN = 'withdrawn', 'Withdrawn'
    SUSPENDED = 'suspended', 'Suspended'
    COMPLETED = 'completed', 'Completed'
    NO_PAYMENT_DUE = 'no_payment_due', 'No Payment Due'


def to_decimal(value: Any) -> Decimal:
    """Coerce an amount to Decimal; missing or malformed amounts count as zero."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except (InvalidOperation, TypeError, ValueError):
            return ZERO
    if not value.is_finite():
        return ZERO
    return value


@dataclass(frozen=True)
class BillingPeriod:
    """A contiguous calendar interval used to bucket expected and actual payments."""

    label: str
    period_start: date
    period_end: date

    def contains(self, day: date) -> bool:
        return self.period_start <= day <= self.period_end


@dataclass(frozen=True)
class PaymentCell:
    """Expected vs. paid breakdown for one student in one billing period."""

    status: str
    expected_amount: Decimal = ZERO
    paid_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO
    failed_amount: Decimal = ZERO
    total_amount: Decimal = ZERO
    orders: Tuple[Any, ...] = ()

    @property
    def unpaid_amount(self) -> Decimal:
        return max(ZERO, self.expected_amount - self.paid_amount)

    @property
    def order_count(self) -> int:
        return len(self.orders)

    @property
    def status_label(self) -> str:
        return PaymentCellStatus(self.status).label


@dataclass(frozen=True)
class StudentTotals:
    total_paid: Decimal = ZERO
    total_expected: Decimal = ZERO
    total_unpaid: Decimal = ZERO


@dataclass
class PaymentReport:
    """
    Full payment grid for a set of students over one year's billing periods.

    Attributes:
        year: Calendar year the periods cover.
        course: Selected course, or None for the all-courses view.
        periods: Billing periods in chronological order.
        grid: ``{student_id: {period_label: PaymentCell}}``.
        totals: Per-student sums across all periods.
        consecutive_unpaid: Per-student at-risk flag.
        threshold: Run length used for the at-risk flag.
    """

    year: int
    course: Optional[Any]
    periods: Tuple[BillingPeriod, ...]
    grid: Dict[Any, Dict[str, PaymentCell]] = field(default_factory=dict)
    totals: Dict[Any, StudentTotals] = field(default_factory=dict)
    consecutive_unpaid: Dict[Any, bool] = field(default_factory=dict)
    threshold: int = 2

    def cells_for(self, student_id):
        """Return the student's cells in period order."""
        row = self.grid.get(student_id, {})
        return [(period, row.get(period.label)) for period in self.periods]

    def at_risk_student_ids(self):
        return [
            student_id
            for student_id, flagged in self.consecutive_unpaid.items()
            if flagged
        ]
