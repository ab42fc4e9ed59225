"""
Budget month and weekly period generation.

A budget month ``(year, month)`` starts on the cycle boundary computed from
the previous calendar month and ends (exclusive) on the boundary of the next
one. Periods are 7-day slices of that range, the last one truncated.
"""
import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterator, List, Optional, Tuple

from django.contrib.auth import get_user_model
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from .exceptions import ConfigurationError, ConflictError, NotFoundError, PersistenceError
from .models import BudgetSetting, ExpenseCategory, Month, Period

User = get_user_model()
logger = logging.getLogger(__name__)

WEEK = timedelta(days=7)


@dataclass
class CycleResult:
    month_id: int
    period_ids: List[int] = field(default_factory=list)
    month_created: bool = False


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def next_month(year: int, month: int) -> Tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


def cycle_boundary(year: int, month: int, day_number: int, day_name: int) -> date:
    """
    First day of budget month ``(year, month)``.

    Takes ``day_number`` of the preceding calendar month (clamped to its last
    day) and moves forward to the next ``day_name`` weekday, 0 = Sunday.
    """
    prev_year, prev_month = previous_month(year, month)
    last_day = calendar.monthrange(prev_year, prev_month)[1]
    anchor = date(prev_year, prev_month, min(day_number, last_day))
    # date.weekday() counts from Monday
    offset = (day_name - (anchor.weekday() + 1) % 7) % 7
    return anchor + timedelta(days=offset)


def cycle_bounds(year: int, month: int, day_number: int, day_name: int) -> Tuple[date, date]:
    if not 1 <= day_number <= 31:
        raise ConfigurationError(f"Cycle start day number must be between 1 and 31, got {day_number}.")
    if not 0 <= day_name <= 6:
        raise ConfigurationError(f"Cycle start day name must be between 0 and 6, got {day_name}.")

    start = cycle_boundary(year, month, day_number, day_name)
    end = cycle_boundary(*next_month(year, month), day_number, day_name)
    if end <= start:
        raise ConfigurationError(f"Budget month {year}-{month:02d} has no length ({start} - {end}).")
    return start, end


def iter_periods(start: date, end: date) -> Iterator[Tuple[date, date, str]]:
    """Yield ``(start, end, week_name)`` for each weekly slice of ``[start, end)``."""
    week = 1
    while start < end:
        stop = min(start + WEEK, end)
        yield start, stop, f"Week {week}"
        start = stop
        week += 1


def period_containing(user, day: date) -> Optional[Period]:
    return Period.objects.filter(user=user, start_date__lte=day, end_date__gt=day).first()


def ensure_current_cycle(user_id, today: Optional[date] = None) -> CycleResult:
    """
    Make sure the budget month for ``today`` and its periods exist for the
    user and that it is the user's only active month.

    Runs as one transaction with the user's row locked, so repeated or
    concurrent calls never duplicate months or periods and leave no partial
    state behind on failure.
    """
    today = today or timezone.localdate()
    try:
        with transaction.atomic():
            return _ensure_cycle(user_id, today)
    except IntegrityError as exc:
        logger.error(f"Conflict while building cycle for user {user_id}: {exc}")
        raise ConflictError(f"Budget month or period already exists for user {user_id}.") from exc
    except DatabaseError as exc:
        logger.error(f"Storage failure while building cycle for user {user_id}: {exc}")
        raise PersistenceError() from exc


def _ensure_cycle(user_id, today: date) -> CycleResult:
    user = User.objects.select_for_update().filter(pk=user_id).first()
    if user is None:
        raise NotFoundError(f"User {user_id} not found.")

    setting = BudgetSetting.objects.filter(user=user).first()
    if setting is None:
        raise NotFoundError(f"Budget settings not found for user {user_id}.")

    start, end = cycle_bounds(
        today.year, today.month, setting.cycle_start_day_number, setting.cycle_start_day_name
    )

    month = Month.objects.filter(user=user, year=today.year, month_number=today.month).first()
    created = month is None
    if created:
        month = Month.objects.create(user=user, year=today.year, month_number=today.month)
        copied = _copy_categories(user, month)
        logger.info(f"Created month {month} with {copied} carried-over categories")

    period_ids = []
    for start_date, end_date, week_name in iter_periods(start, end):
        period, made = Period.objects.get_or_create(
            user=user,
            start_date=start_date,
            end_date=end_date,
            defaults={"month": month, "week_name": week_name},
        )
        if made:
            logger.info(f"Saved period {period.id}: {week_name} {start_date} - {end_date}")
        period_ids.append(period.id)

    Month.objects.filter(user=user).update(active=False)
    Month.objects.filter(pk=month.pk).update(active=True)

    return CycleResult(month_id=month.id, period_ids=period_ids, month_created=created)


def _copy_categories(user, month: Month) -> int:
    budgets = {}
    for category in ExpenseCategory.objects.filter(user=user).exclude(month=month).order_by("id"):
        budgets.setdefault(category.name, category.budget)

    ExpenseCategory.objects.bulk_create(
        [ExpenseCategory(user=user, month=month, name=name, budget=budget) for name, budget in budgets.items()]
    )
    return len(budgets)
