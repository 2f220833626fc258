# Weightage arithmetic over goal items (dicts or GoalItem)
import math
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation

WEIGHTAGE_LIMIT = 100


def item_weightage(item) -> int:
    """Integer weightage of one item; anything unusable counts as 0."""
    value = item.get("weightage") if isinstance(item, Mapping) else getattr(item, "weightage", None)
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, (str, Decimal)):
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            return 0
        return int(number) if number.is_finite() else 0
    return 0


def total_weightage(items) -> int:
    return sum(item_weightage(i) for i in (items or ()))


def is_over_limit(items) -> bool:
    return total_weightage(items) > WEIGHTAGE_LIMIT


def remaining_weightage(items) -> int:
    # negative when over the limit
    return WEIGHTAGE_LIMIT - total_weightage(items)


def summary(items) -> dict:
    total = total_weightage(items)
    return {
        "total_weightage": total,
        "remaining_weightage": WEIGHTAGE_LIMIT - total,
        "is_over_limit": total > WEIGHTAGE_LIMIT,
        "limit": WEIGHTAGE_LIMIT,
    }
