from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Slot:
    """
    One position in the pyramid.

    Both coordinates are 1-based grid positions; `row` 1 is the top row.
    """

    row: int
    column: int


@dataclass(frozen=True)
class PyramidLayout:
    """Slots of a pyramid, top row first."""

    rows: tuple[tuple[Slot, ...], ...]

    @property
    def row_sizes(self) -> list[int]:
        """Slot count of each row, top to bottom."""
        return [len(row) for row in self.rows]

    @property
    def slots(self) -> list[Slot]:
        """All slots in row-major order."""
        return [slot for row in self.rows for slot in row]

    @property
    def total_slots(self) -> int:
        return sum(len(row) for row in self.rows)

    @property
    def grid_width(self) -> int:
        """Number of grid columns the slots are centered in."""
        return self.total_slots

    def __contains__(self, slot: object) -> bool:
        return any(slot in row for row in self.rows)
