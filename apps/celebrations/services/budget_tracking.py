"""
Group budget tracking.

A group may configure one budget approach:

    per_gift  - suggested amount per celebration; nothing is tracked
    monthly   - pooled budget for celebrations in the current calendar month
    yearly    - pooled budget for the current group-creation anniversary year

Spending is the sum of celebration contributions for celebrations whose
event date falls inside the period.
"""

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple
from uuid import UUID

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.db.models import Sum
from django.utils import timezone

from apps.celebrations.models import CelebrationContribution
from apps.core.money import ZERO, cents_to_amount
from apps.groups.models import BudgetApproach, Group
from apps.groups.services import get_group

logger = logging.getLogger(__name__)

WARNING_THRESHOLD = Decimal('75')
DANGER_THRESHOLD = Decimal('90')
OVER_THRESHOLD = Decimal('100')


def threshold_level(percentage: Decimal) -> str:
    """Map a spent percentage to a traffic-light level."""
    if percentage < WARNING_THRESHOLD:
        return 'normal'
    if percentage < DANGER_THRESHOLD:
        return 'warning'
    if percentage < OVER_THRESHOLD:
        return 'danger'
    return 'over'


def _current_period(group: Group, today: date) -> Tuple[date, date]:
    if group.budget_approach == BudgetApproach.MONTHLY:
        start = today.replace(day=1)
        return start, start + relativedelta(months=1)

    created = group.created_at
    if isinstance(created, datetime):
        created = timezone.localdate(created) if timezone.is_aware(created) else created.date()
    years = max(relativedelta(today, created).years, 0)
    start = created + relativedelta(years=years)
    return start, start + relativedelta(years=1)


def _spent_between(group: Group, start: date, end: date) -> Decimal:
    total = CelebrationContribution.objects.filter(
        celebration__group=group,
        celebration__event_date__gte=start,
        celebration__event_date__lt=end,
    ).aggregate(total=Sum('amount'))['total']
    return total or ZERO


def get_group_budget_status(*, group_id: UUID, now: Optional[date] = None) -> Optional[dict]:
    """
    Get the budget status of a group for the current period.

    Args:
        group_id: UUID of the group
        now: Reference date (defaults to today in the active timezone)

    Returns:
        None when the group has no budget configured, otherwise a dict:
            - group_id (UUID)
            - approach (str)
            - budget_amount (Decimal): In currency units
            - spent (Decimal)
            - remaining (Decimal): May be negative when over budget
            - percentage (int): Spent as a whole percentage of budget
            - threshold_level (str): normal, warning, danger or over
            - period_start / period_end (date | None): end is exclusive
            - currency (str)

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    group = get_group(group_id=group_id)

    if not group.budget_approach or group.budget_amount is None:
        return None

    if now is None:
        today = timezone.localdate()
    elif isinstance(now, datetime):
        today = now.date()
    else:
        today = now

    budget = cents_to_amount(group.budget_amount)
    currency = getattr(settings, 'GIFTING_CURRENCY', 'USD')

    if group.budget_approach == BudgetApproach.PER_GIFT:
        return {
            'group_id': group.id,
            'approach': group.budget_approach,
            'budget_amount': budget,
            'spent': ZERO,
            'remaining': budget,
            'percentage': 0,
            'threshold_level': 'normal',
            'period_start': None,
            'period_end': None,
            'currency': currency,
        }

    start, end = _current_period(group, today)
    spent = _spent_between(group, start, end)

    if budget > 0:
        ratio = spent * 100 / budget
    else:
        ratio = ZERO

    logger.debug(
        "Budget for group %s (%s %s..%s): spent %s of %s",
        group.id, group.budget_approach, start, end, spent, budget,
    )

    return {
        'group_id': group.id,
        'approach': group.budget_approach,
        'budget_amount': budget,
        'spent': spent,
        'remaining': budget - spent,
        'percentage': int(ratio.quantize(Decimal('1'), rounding=ROUND_HALF_UP)),
        'threshold_level': threshold_level(ratio),
        'period_start': start,
        'period_end': end,
        'currency': currency,
    }
