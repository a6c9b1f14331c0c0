"""Split day blocks into dish entries.

The extractor walks the block's lines with a small state machine:

* ``AWAITING_DISH`` - nothing emitted yet, any line opens a dish;
* ``IN_CATEGORY`` - a category keyword was just seen, any line opens a dish;
* ``IN_DISH`` - a dish is open, the next line either continues it or opens
  another one.

A category keyword on its own line switches the category and is not emitted.
When the same word carries a bullet ("- Dessert") it is a dish name.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from enum import Enum
import logging
from typing import Sequence

from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.models import DayBlock
from weekmenu.extraction.normalization import normalize_text
from weekmenu.schedule.models import DishEntry

logger = logging.getLogger(__name__)

_CONTINUATION_CHARS = ",&(+/"
_CONTINUATION_WORDS = frozenset({"and", "with", "or", "et", "avec", "ou"})


class DishState(Enum):
    AWAITING_DISH = "awaiting_dish"
    IN_DISH = "in_dish"
    IN_CATEGORY = "in_category"


def strip_bullet(text: str, bullet_chars: str) -> tuple[bool, str]:
    """Return whether the line carries a leading bullet and the bare text."""

    stripped = text.lstrip()
    if stripped and stripped[0] in bullet_chars:
        return True, stripped.lstrip(bullet_chars + " ").strip()
    return False, stripped.strip()


def category_for(text: str, settings: ExtractionSettings) -> str | None:
    key = normalize_text(text).rstrip(":").strip()
    return settings.category_keywords.get(key)


def _is_continuation(text: str, *, has_bullet: bool, bulleted_block: bool) -> bool:
    if has_bullet:
        return False
    first = text[0]
    if first in _CONTINUATION_CHARS or first.islower():
        return True
    first_word = text.split(" ", 1)[0].casefold()
    if first_word in _CONTINUATION_WORDS:
        return True
    # Without bullets a capitalised line is the only signal for a new dish.
    return bulleted_block


def extract_dishes(block: DayBlock, settings: ExtractionSettings | None = None) -> list[DishEntry]:
    """Return the block's dishes in extraction order, duplicates removed."""

    active = settings or ExtractionSettings()
    bulleted_block = any(strip_bullet(line.text, active.bullet_chars)[0] for line in block.lines)

    state = DishState.AWAITING_DISH
    category: str | None = None
    pending: list[tuple[str, str | None]] = []

    for line in block.lines:
        has_bullet, text = strip_bullet(line.text, active.bullet_chars)
        if not text:
            continue

        if not has_bullet:
            keyword = category_for(text, active)
            if keyword is not None:
                category = keyword
                state = DishState.IN_CATEGORY
                continue

        if state is DishState.IN_DISH and _is_continuation(
            text, has_bullet=has_bullet, bulleted_block=bulleted_block
        ):
            name, dish_category = pending[-1]
            pending[-1] = (f"{name} {text}", dish_category)
            continue

        pending.append((text, category))
        state = DishState.IN_DISH

    dishes: list[DishEntry] = []
    seen: set[str] = set()
    for name, dish_category in pending:
        key = normalize_text(name)
        if key in seen:
            continue
        seen.add(key)
        dishes.append(DishEntry(name=name, day=block.date, category=dish_category))
    return dishes


def drop_everyday_dishes(
    days: Sequence[tuple[date, Sequence[DishEntry]]],
    settings: ExtractionSettings | None = None,
) -> list[tuple[date, list[DishEntry]]]:
    """Remove standing items printed under (nearly) every day of the document.

    Applies only when the document covers at least ``everyday_min_days``
    days; a dish is standing when it appears on all days but one or more.
    """

    active = settings or ExtractionSettings()
    result = [(day, list(dishes)) for day, dishes in days]
    if len(result) < active.everyday_min_days:
        return result

    counts: Counter[str] = Counter()
    for _, dishes in result:
        counts.update({normalize_text(dish.name) for dish in dishes})

    threshold = len(result) - 1
    standing = {name for name, count in counts.items() if count >= threshold}
    if not standing:
        return result

    logger.info("Dropping %d dishes served every day: %s", len(standing), ", ".join(sorted(standing)))
    return [
        (day, [dish for dish in dishes if normalize_text(dish.name) not in standing])
        for day, dishes in result
    ]
