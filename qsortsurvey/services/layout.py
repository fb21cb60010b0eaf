"""
Pyramid slot layout.

Turns a card count into the pyramid the cards are sorted into. Rows are
planned 1, 3, 5, 7, ... from the apex down; when the next odd row no longer
fits, the leftover cards widen the last planned row, which is the bottom row.
Rows are centered in a grid as wide as the total number of slots.
"""

import logging

from qsortsurvey.models.slot import PyramidLayout, Slot

logger = logging.getLogger(__name__)


def plan_rows(card_count: int) -> list[int]:
    """
    Row sizes for `card_count` cards, top row first.

    Examples:
        plan_rows(2) -> [2]
        plan_rows(4) -> [1, 3]
        plan_rows(6) -> [1, 5]
    """
    card_count = max(card_count, 1)
    remaining = card_count
    row_size = 1
    rows: list[int] = []

    while remaining > 0:
        if row_size <= remaining:
            rows.append(row_size)
            remaining -= row_size
        else:
            rows[-1] += remaining
            remaining = 0
        row_size += 2

    shortfall = card_count - sum(rows)
    if shortfall > 0:
        logger.error(
            "Pyramid for %d cards is %d slots short, widening first row", card_count, shortfall
        )
        rows[0] += shortfall

    return rows


def layout(card_count: int) -> PyramidLayout:
    """
    Build the pyramid of slots for `card_count` cards.

    Rows are returned top to bottom. Each row starts at column
    floor((total_slots - row_size) / 2) + 1 so that every row is centered
    on the same axis; rows are numbered from 1.
    """
    sizes = plan_rows(card_count)
    total = sum(sizes)

    rows = []
    for row_number, size in enumerate(sizes, start=1):
        start = (total - size) // 2 + 1
        rows.append(tuple(Slot(row=row_number, column=start + i) for i in range(size)))

    logger.debug("Pyramid for %d cards: %s", card_count, sizes)
    return PyramidLayout(rows=tuple(rows))
