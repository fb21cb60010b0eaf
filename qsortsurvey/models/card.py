from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Card:
    """
    One project offered for ranking.

    Attributes:
        id: Project name, unique within a team + version
        text: Summary shown on the card, "<Project> - <MW>MW (<Technology>)"
        details: Full source record, every value normalized to text
    """

    id: str
    text: str
    details: dict[str, str] = field(default_factory=dict, compare=False)


@dataclass
class QSortOverview:
    """Every version in the workbook together with its cards."""

    versions: list[str] = field(default_factory=list)
    cards: dict[str, list[Card]] = field(default_factory=dict)

    def card_count(self, version: str) -> int:
        """Number of cards listed under a version."""
        return len(self.cards.get(version, []))
