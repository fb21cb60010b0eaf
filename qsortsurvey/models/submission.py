from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Placement:
    """A card's final position: the slot column and the card text."""

    column: int
    card: str


@dataclass
class Submission:
    """
    A completed sort handed to the recorder.

    Attributes:
        user_name: Participant name as entered
        version: Version that was sorted
        placements: Final (column, card text) pairs in slot traversal order
        team: Team the cards were loaded for, when known
    """

    user_name: str
    version: str
    placements: list[Placement] = field(default_factory=list)
    team: str | None = None


@dataclass(frozen=True, slots=True)
class SubmissionRecord:
    """One persisted line of a submission."""

    name: str
    version: str
    submit_number: int
    column: int
    project_name: str


# Column order of the persisted submission store
RECORD_FIELDS = ("name", "version", "submit_number", "column", "project_name")
