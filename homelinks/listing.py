"""Search, urgency and ordering rules used by the dashboard grid."""

import math
from datetime import datetime
from typing import Iterable, List, Optional

from .models import AppLink

NO_DEADLINE = 9999


def days_left(iso: Optional[str], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days until local midnight of *iso* (``YYYY-MM-DD``), rounded up.

    Past dates give zero or a negative number.
    """
    if not iso:
        return None
    try:
        target = datetime.strptime(iso.strip(), "%Y-%m-%d")
    except ValueError:
        return None
    now = now or datetime.now()
    return math.ceil((target - now).total_seconds() / 86400)


def urgency(item: AppLink, now: Optional[datetime] = None) -> int:
    candidates = [
        days_left(item.cert_renewal_date, now),
        days_left(item.token_expiry_date, now),
    ]
    return min([d for d in candidates if d is not None], default=NO_DEADLINE)


def matches(item: AppLink, q: str = "", tag: str = "", favorite_only: bool = False) -> bool:
    if favorite_only and not item.favorite:
        return False
    if tag and tag not in item.tags:
        return False
    query = q.strip().casefold()
    if not query:
        return True
    fields = [item.name, item.description, item.url, item.git_url, *item.tags]
    return any(query in str(v).casefold() for v in fields if v)


def filter_items(
    items: Iterable[AppLink], q: str = "", tag: str = "", favorite_only: bool = False
) -> List[AppLink]:
    return [it for it in items if matches(it, q, tag, favorite_only)]


def sort_items(
    items: Iterable[AppLink],
    sort_mode: str,
    expired_first: bool = True,
    now: Optional[datetime] = None,
) -> List[AppLink]:
    """Pinned items first, then the order *sort_mode* asks for."""
    items = list(items)
    direction = 1 if expired_first else -1

    if sort_mode == "alpha_asc":
        ordered = sorted(items, key=lambda it: it.name.casefold())
    elif sort_mode == "alpha_desc":
        ordered = sorted(items, key=lambda it: it.name.casefold(), reverse=True)
    elif sort_mode == "pinned_fav_urgency":
        ordered = sorted(items, key=lambda it: (not it.favorite, direction * urgency(it, now)))
    else:
        ordered = sorted(items, key=lambda it: direction * urgency(it, now))

    # stable, so the mode's order is kept within the pinned and unpinned groups
    return sorted(ordered, key=lambda it: not it.pinned)


def all_tags(items: Iterable[AppLink]) -> List[str]:
    return sorted({tag for it in items for tag in it.tags})
