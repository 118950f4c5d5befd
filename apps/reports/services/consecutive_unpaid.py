"""Consecutive-unpaid service - flags students for collections follow-up."""

from typing import Iterable, Optional

from django.conf import settings

from ..exceptions import InvalidThresholdError
from .types import PaymentCellStatus


# Statuses that extend an unpaid streak
OUTSTANDING_STATUSES = frozenset({
    PaymentCellStatus.UNPAID.value,
    PaymentCellStatus.PARTIAL_PAYMENT.value,
})

# Statuses skipped without breaking or extending a streak
NEUTRAL_STATUSES = frozenset({
    PaymentCellStatus.NOT_STARTED.value,
    PaymentCellStatus.NO_ENROLLMENT.value,
})


def default_unpaid_threshold() -> int:
    return getattr(settings, 'PAYMENT_REPORT_UNPAID_THRESHOLD', 2)


def has_consecutive_unpaid(statuses: Iterable[str], threshold: Optional[int] = None) -> bool:
    """
    Check whether statuses contain an unbroken run of unpaid periods.

    Statuses must be in chronological period order. ``unpaid`` and
    ``partial_payment`` extend the run; ``not_started`` and
    ``no_enrollment`` are skipped; any other status resets it.

    Args:
        statuses: Period statuses in chronological order.
        threshold: Run length that flags the student.
            Defaults to settings.PAYMENT_REPORT_UNPAID_THRESHOLD.

    Returns:
        True as soon as the run reaches the threshold.

    Raises:
        InvalidThresholdError: If threshold is below 1.

    Example:
        >>> has_consecutive_unpaid(['unpaid', 'not_started', 'unpaid'])
        True
        >>> has_consecutive_unpaid(['unpaid', 'paid', 'unpaid'])
        False
    """
    if threshold is None:
        threshold = default_unpaid_threshold()
    if threshold < 1:
        raise InvalidThresholdError(f"Threshold must be at least 1, got {threshold}")

    run = 0
    for status in map(str, statuses):
        if status in NEUTRAL_STATUSES:
            continue
        if status in OUTSTANDING_STATUSES:
            run += 1
            if run >= threshold:
                return True
        else:
            run = 0
    return False
