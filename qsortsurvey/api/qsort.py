"""
Q-sort API endpoints.

Serves the team, version and card pickers, the pyramid layout, and accepts
finished sorts. Known failures raised by the services are turned into
`{"error": ...}` responses by the application's exception handler.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from qsortsurvey.api.dependencies import get_query_service, get_recorder
from qsortsurvey.models.card import Card
from qsortsurvey.models.failure import KnownError, ValidationError
from qsortsurvey.models.submission import Placement, Submission
from qsortsurvey.services.layout import layout
from qsortsurvey.services.query import QueryService
from qsortsurvey.services.recorder import SubmissionRecorder

logger = logging.getLogger(__name__)

router = APIRouter(tags=["qsort"])

# Largest pyramid the layout endpoint will build
MAX_LAYOUT_CARDS = 1000


class ErrorResponse(BaseModel):
    """Error body for failed requests."""

    error: str


class TeamsResponse(BaseModel):
    teams: list[str]


class VersionOption(BaseModel):
    name: str


class VersionsResponse(BaseModel):
    """Versions a team may sort (only those with enough cards)."""

    versions: list[VersionOption]


class CardResponse(BaseModel):
    """A card as shown in the parking lot."""

    id: str
    text: str
    details: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls(id=card.id, text=card.text, details=card.details)


class CardsResponse(BaseModel):
    cards: list[CardResponse]


class OverviewResponse(BaseModel):
    """Every version and the cards listed under it."""

    versions: list[str]
    cards: dict[str, list[CardResponse]] = Field(default_factory=dict)


class SlotResponse(BaseModel):
    row: int
    column: int


class LayoutResponse(BaseModel):
    """Pyramid slots, top row first."""

    rows: list[list[SlotResponse]]
    row_sizes: list[int] = Field(serialization_alias="rowSizes")
    total_slots: int = Field(serialization_alias="totalSlots")
    grid_width: int = Field(serialization_alias="gridWidth")


class SortedEntry(BaseModel):
    """One placed card: its slot column and the card text."""

    column: int
    card: str


class SubmitRequest(BaseModel):
    """Request body for a finished sort."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    version: str | None = None
    team: str | None = None
    sorted_data: list[SortedEntry] | None = Field(
        default=None,
        alias="sortedData",
        examples=[[{"column": 5, "card": "Solar Farm A - 120MW (Solar)"}]],
    )


class SubmitResponse(BaseModel):
    success: bool
    message: str | None = None
    submit_number: int | None = Field(default=None, serialization_alias="submitNumber")


class SubmitFailure(BaseModel):
    success: bool = False
    error: str


def _required(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(message)
    return value.strip()


@router.get(
    "/get-teams",
    response_model=TeamsResponse,
    responses={500: {"model": ErrorResponse}},
)
def get_teams(
    queries: Annotated[QueryService, Depends(get_query_service)],
) -> TeamsResponse:
    """List every team in the workbook."""
    return TeamsResponse(teams=queries.list_teams())


@router.get(
    "/get-qsort-details",
    response_model=VersionsResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def get_qsort_details(
    queries: Annotated[QueryService, Depends(get_query_service)],
    team: str | None = None,
) -> VersionsResponse:
    """
    List the versions a team can sort.

    Versions with fewer than five cards for the team are left out.
    """
    team = _required(team, "Missing team parameter")
    versions = queries.list_eligible_versions(team)
    return VersionsResponse(versions=[VersionOption(name=v) for v in versions])


@router.get(
    "/get-version-data",
    response_model=CardsResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def get_version_data(
    queries: Annotated[QueryService, Depends(get_query_service)],
    version: str | None = None,
    team: str | None = None,
) -> CardsResponse:
    """
    Cards for a team + version.

    An empty list means there is nothing to sort; it is not an error.
    """
    if not (version and version.strip()) or not (team and team.strip()):
        raise ValidationError("Both version and team parameters are required")

    cards = queries.list_cards(team, version)
    return CardsResponse(cards=[CardResponse.from_card(c) for c in cards])


@router.get(
    "/qsort-data",
    response_model=OverviewResponse,
    responses={500: {"model": ErrorResponse}},
)
def get_qsort_data(
    queries: Annotated[QueryService, Depends(get_query_service)],
) -> OverviewResponse:
    """All versions and their cards, regardless of team."""
    overview = queries.overview()
    return OverviewResponse(
        versions=overview.versions,
        cards={
            version: [CardResponse.from_card(c) for c in cards]
            for version, cards in overview.cards.items()
        },
    )


@router.get("/layout", response_model=LayoutResponse)
async def get_layout(
    count: Annotated[int, Query(le=MAX_LAYOUT_CARDS)],
) -> LayoutResponse:
    """Pyramid of slots for `count` cards. Counts below 1 build a single slot."""
    pyramid = layout(count)
    return LayoutResponse(
        rows=[[SlotResponse(row=s.row, column=s.column) for s in row] for row in pyramid.rows],
        row_sizes=pyramid.row_sizes,
        total_slots=pyramid.total_slots,
        grid_width=pyramid.grid_width,
    )


@router.post(
    "/submit",
    response_model=SubmitResponse,
    responses={400: {"model": SubmitFailure}, 500: {"model": SubmitFailure}},
)
async def submit(
    request: SubmitRequest,
    recorder: Annotated[SubmissionRecorder, Depends(get_recorder)],
) -> SubmitResponse | JSONResponse:
    """
    Record a finished sort.

    Each placed card becomes one stored record numbered with the user's
    submission count for this version.
    """
    submission = Submission(
        user_name=request.name or "",
        version=request.version or "",
        placements=[Placement(column=e.column, card=e.card) for e in request.sorted_data or []],
        team=request.team,
    )

    try:
        submit_number = await recorder.record(submission)
    except KnownError as e:
        if e.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Submission from %r failed: %s", request.name, e.message)
        else:
            logger.warning("Rejected submission from %r: %s", request.name, e.message)
        return JSONResponse(
            status_code=e.status_code,
            content=SubmitFailure(error=e.message).model_dump(),
        )

    return SubmitResponse(
        success=True,
        message="Submission successful",
        submit_number=submit_number,
    )
