"""
Sort session: the state of one participant's Q-sort.

A session holds the cards loaded for a team + version, the pyramid built for
them, and where each card currently sits. Every card is either in exactly
one slot or in the parking lot; each user action (place, remove, reset,
submit) is a method that keeps that true. Nothing here touches the network
or storage: `try_submit` only produces the Submission that the caller hands
to the recorder.

States (derived, never stored):
- EMPTY: no cards loaded
- LOADED: cards loaded, all in the parking lot
- PARTIAL: some cards placed
- COMPLETE: parking lot empty; the only state that can submit
"""

from enum import Enum

from qsortsurvey.models.card import Card
from qsortsurvey.models.failure import FailureKind, ValidationError
from qsortsurvey.models.slot import PyramidLayout, Slot
from qsortsurvey.models.submission import Placement, Submission
from qsortsurvey.services.layout import layout


class SessionState(str, Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    PARTIAL = "partial"
    COMPLETE = "complete"


class SortSession:
    """Card placement for one team + version."""

    def __init__(self) -> None:
        self.team: str | None = None
        self.version: str | None = None
        self.layout: PyramidLayout | None = None
        self._cards: dict[str, Card] = {}
        self._parking_lot: list[str] = []
        self._slot_cards: dict[Slot, str] = {}
        self._card_slots: dict[str, Slot] = {}

    # --- Queries ---

    @property
    def state(self) -> SessionState:
        if not self._cards:
            return SessionState.EMPTY
        if not self._parking_lot:
            return SessionState.COMPLETE
        if self._slot_cards:
            return SessionState.PARTIAL
        return SessionState.LOADED

    @property
    def cards(self) -> list[Card]:
        return list(self._cards.values())

    @property
    def parking_lot(self) -> list[Card]:
        """Unplaced cards, in the order they were returned to the lot."""
        return [self._cards[card_id] for card_id in self._parking_lot]

    @property
    def unplaced_count(self) -> int:
        return len(self._parking_lot)

    def card_at(self, slot: Slot) -> Card | None:
        card_id = self._slot_cards.get(slot)
        return self._cards[card_id] if card_id is not None else None

    def slot_of(self, card_id: str) -> Slot | None:
        return self._card_slots.get(card_id)

    def placements(self) -> list[tuple[Slot, Card]]:
        """Occupied slots in pyramid traversal order (top row first)."""
        if self.layout is None:
            return []
        return [
            (slot, self._cards[self._slot_cards[slot]])
            for slot in self.layout.slots
            if slot in self._slot_cards
        ]

    # --- Transitions ---

    def load(self, team: str, version: str, cards: list[Card]) -> None:
        """
        Start a sort of `cards` for a team + version.

        Replaces any previous session state. Cards with an id already seen
        are ignored, so each card appears exactly once.
        """
        self.team = team
        self.version = version
        self._cards = {}
        for card in cards:
            self._cards.setdefault(card.id, card)
        self._parking_lot = list(self._cards)
        self._slot_cards = {}
        self._card_slots = {}
        self.layout = layout(len(self._cards)) if self._cards else None

    def place_card(self, card_id: str, slot: Slot) -> None:
        """
        Move a card into a slot.

        Any card already in the slot goes back to the parking lot first.
        The moved card leaves the parking lot or its previous slot.

        Raises:
            ValidationError: If the card or slot is not part of this session
        """
        self._require_card(card_id)
        if self.layout is None or slot not in self.layout:
            raise ValidationError(
                f"Slot ({slot.row}, {slot.column}) is not part of the pyramid",
                kind=FailureKind.INVALID_INPUT,
            )

        if self._slot_cards.get(slot) == card_id:
            return

        occupant = self._slot_cards.get(slot)
        if occupant is not None:
            self._to_parking_lot(occupant)

        self._detach(card_id)
        self._slot_cards[slot] = card_id
        self._card_slots[card_id] = slot

    def remove_card(self, card_id: str) -> None:
        """Return a card to the parking lot. No-op if it is already there."""
        self._require_card(card_id)
        if card_id in self._card_slots:
            self._to_parking_lot(card_id)

    def reset(self) -> None:
        """Return every placed card to the parking lot."""
        for slot, _card in self.placements():
            self._to_parking_lot(self._slot_cards[slot])

    def clear(self) -> None:
        """Discard placements after a successful submission."""
        self.reset()

    def try_submit(self, user_name: str | None) -> Submission:
        """
        Snapshot the finished sort for recording.

        The session is left untouched whether or not this succeeds.

        Raises:
            ValidationError: If no cards are loaded, the name is blank, or
                cards remain in the parking lot
        """
        if self.state is SessionState.EMPTY or self.version is None:
            raise ValidationError("Please select a Q-sort version before submitting.")

        name = (user_name or "").strip()
        if not name:
            raise ValidationError("Name is required for submission.")

        if self._parking_lot:
            count = len(self._parking_lot)
            raise ValidationError(
                f"You must place all {count} cards before submitting.",
                kind=FailureKind.INCOMPLETE_SORT,
                unplaced=count,
            )

        return Submission(
            user_name=name,
            version=self.version,
            placements=[
                Placement(column=slot.column, card=card.text) for slot, card in self.placements()
            ],
            team=self.team,
        )

    # --- Internals ---

    def _require_card(self, card_id: str) -> None:
        if card_id not in self._cards:
            raise ValidationError(
                f"Card '{card_id}' is not part of this sort",
                kind=FailureKind.INVALID_INPUT,
            )

    def _detach(self, card_id: str) -> None:
        slot = self._card_slots.pop(card_id, None)
        if slot is not None:
            del self._slot_cards[slot]
        if card_id in self._parking_lot:
            self._parking_lot.remove(card_id)

    def _to_parking_lot(self, card_id: str) -> None:
        self._detach(card_id)
        self._parking_lot.append(card_id)
