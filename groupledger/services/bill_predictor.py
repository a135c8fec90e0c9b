import calendar
import logging
import math
import re
from datetime import datetime, timedelta
from typing import Dict, Iterable, List
from ..schemas import ExpenseRecord, Frequency, RecurringPatternOut

logger = logging.getLogger(__name__)

# Upper bound (inclusive) on the average gap in days for each frequency; first match wins.
FREQUENCY_THRESHOLDS = (
    (8, Frequency.weekly),
    (18, Frequency.biweekly),
    (35, Frequency.monthly),
    (100, Frequency.quarterly),
)

_NOISE = re.compile(r"payment to|payment for|invoice|bill|receipt|transaction|#\d+", re.IGNORECASE)

def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)

def _add_months(when: datetime, months: int) -> datetime:
    month_index = when.month - 1 + months
    year = when.year + month_index // 12
    month = month_index % 12 + 1
    day = min(when.day, calendar.monthrange(year, month)[1])
    return when.replace(year=year, month=month, day=day)

def advance_due_date(when: datetime, frequency: Frequency) -> datetime:
    """One period after ``when``. Month-based periods clamp to the last day of the target month."""
    frequency = Frequency(frequency)
    if frequency is Frequency.weekly:
        return when + timedelta(days=7)
    if frequency is Frequency.biweekly:
        return when + timedelta(days=14)
    if frequency is Frequency.monthly:
        return _add_months(when, 1)
    if frequency is Frequency.quarterly:
        return _add_months(when, 3)
    return _add_months(when, 12)

def classify_interval(avg_interval: float) -> Frequency:
    for limit, frequency in FREQUENCY_THRESHOLDS:
        if avg_interval <= limit:
            return frequency
    return Frequency.yearly

def bucket_key(expense: ExpenseRecord) -> str:
    words = [w for w in expense.description.lower().split(" ") if len(w) > 3][:3]
    return "-".join([str(_round_half_up(expense.amount))] + words)

def interval_confidence(intervals: List[int]) -> int:
    avg = sum(intervals) / len(intervals)
    std_dev = math.sqrt(sum((v - avg) ** 2 for v in intervals) / len(intervals))
    if avg == 0:
        # gaps are never negative, so a zero mean means every gap is zero
        return 100
    return _round_half_up(max(0.0, min(100.0, 100 - (std_dev / avg) * 100)))

def detect_recurring_expenses(expenses: Iterable[ExpenseRecord]) -> List[RecurringPatternOut]:
    """One pattern per series of two or more similar expenses, highest confidence first."""
    buckets: Dict[str, List[ExpenseRecord]] = {}
    for e in expenses:
        buckets.setdefault(bucket_key(e), []).append(e)

    patterns: List[RecurringPatternOut] = []
    for key, series in buckets.items():
        if len(series) < 2:
            continue
        series = sorted(series, key=lambda e: e.created_at)
        intervals = [
            _round_half_up((b.created_at - a.created_at).total_seconds() / 86400)
            for a, b in zip(series, series[1:])
        ]
        avg_interval = sum(intervals) / len(intervals)
        frequency = classify_interval(avg_interval)
        latest = series[-1]
        patterns.append(RecurringPatternOut(
            description=latest.description,
            amount=latest.amount,
            category=latest.category,
            frequency=frequency,
            next_due_date=advance_due_date(latest.created_at, frequency),
            confidence=interval_confidence(intervals),
            occurrences=len(series),
        ))
        logger.debug("bucket %r: %d occurrences, avg gap %.1f days -> %s", key, len(series), avg_interval, frequency.value)

    patterns.sort(key=lambda p: p.confidence, reverse=True)
    return patterns

def generate_bill_name(description: str) -> str:
    """Strip transaction noise ("Payment to", "invoice", "#1234", ...) and title-case what's left."""
    cleaned = _NOISE.sub("", description).strip()
    name = " ".join(w[:1].upper() + w[1:].lower() for w in cleaned.split(" "))
    return name or description
