"""Ranking of the current frequency window.

Phrases are grouped case-insensitively (``str.casefold``); the first-seen
casing represents the group. Output order is count descending, then phrase,
so identical input always ranks identically.
"""

from __future__ import annotations

import logging

from ...core.exceptions import InsufficientDataError
from ...core.models import RankedItem
from ...storage.frequency import FrequencyStore

logger = logging.getLogger(__name__)

MIN_COUNT = 3
MIN_ITEMS = 10
TOP_N = 10


def group_key(phrase: str) -> str:
    return phrase.casefold()


def compute_ranking(
    store: FrequencyStore,
    full: bool = False,
    *,
    min_count: int = MIN_COUNT,
    min_items: int = MIN_ITEMS,
    top_n: int = TOP_N,
) -> list[RankedItem]:
    """Rank the phrases currently in ``store``.

    Args:
        store: The shared frequency store (only snapshotted, never modified).
        full: On-demand mode. Keeps groups below ``min_count`` and skips the
            ``top_n`` truncation.
        min_count: Minimum support for periodic summaries.
        min_items: Fewer distinct groups than this raises InsufficientDataError.
        top_n: Length of the periodic summary.

    Returns:
        Ranked items, highest count first.
    """
    snapshot = store.snapshot()

    # key -> [representative, count]; dicts keep first-seen order
    groups: dict[str, list] = {}
    for obs in snapshot:
        key = group_key(obs.content)
        group = groups.get(key)
        if group is None:
            groups[key] = [obs.content, 1]
        else:
            group[1] += 1

    items: list[RankedItem] = []
    seen: set[str] = set()
    for phrase, count in groups.values():
        if count < min_count and not full:
            continue
        if phrase in seen:
            continue
        seen.add(phrase)
        items.append(RankedItem(phrase=phrase, count=count))

    if len(items) < min_items:
        raise InsufficientDataError(
            f"too few items: {len(items)}", items=len(items), required=min_items
        )

    items.sort(key=lambda item: (-item.count, item.phrase))
    if not full:
        items = items[:top_n]
    logger.debug("Ranked %d items from %d observations (full=%s)", len(items), len(snapshot), full)
    return items
