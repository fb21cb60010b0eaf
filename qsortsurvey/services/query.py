"""
Team, version and card queries over the survey workbook.

Each call reads the workbook fresh through the SpreadsheetSource. Team and
version comparisons use normalized text on both sides, so values typed as
numbers in the spreadsheet match the strings sent by the browser.
"""

import logging

from qsortsurvey.config import MIN_VERSION_CARDS
from qsortsurvey.models.card import Card, QSortOverview
from qsortsurvey.sources.spreadsheet import (
    CAPACITY_MW,
    CARD_TEAM,
    CARD_VERSION,
    CARDS_SHEET,
    PROJECT_NAME,
    TEAM_NAME,
    TEAMS_SHEET,
    TECHNOLOGY,
    VERSION_NAME,
    VERSIONS_SHEET,
    SheetTable,
    SpreadsheetSource,
    normalize_value,
)

logger = logging.getLogger(__name__)

CARD_COLUMNS = (CARD_TEAM, CARD_VERSION, PROJECT_NAME, CAPACITY_MW, TECHNOLOGY)


def card_text(record: dict[str, str]) -> str:
    """Summary line shown on a card."""
    return f"{record[PROJECT_NAME]} - {record[CAPACITY_MW]}MW ({record[TECHNOLOGY]})"


def record_to_card(record: dict[str, str]) -> Card:
    return Card(id=record[PROJECT_NAME], text=card_text(record), details=dict(record))


class QueryService:
    """Read-side queries backing the team, version and card pickers."""

    def __init__(self, source: SpreadsheetSource, min_cards: int = MIN_VERSION_CARDS):
        self.source = source
        self.min_cards = min_cards

    def _cards_table(self, *extra_sheets: str) -> dict[str, SheetTable]:
        tables = self.source.read(CARDS_SHEET, *extra_sheets)
        tables[CARDS_SHEET].require(*CARD_COLUMNS)
        return tables

    def list_teams(self) -> list[str]:
        """Distinct team names from the Teams sheet, in sheet order."""
        table = self.source.read(TEAMS_SHEET)[TEAMS_SHEET]
        table.require(TEAM_NAME)

        teams = list(dict.fromkeys(row[TEAM_NAME] for row in table.rows if row[TEAM_NAME]))
        logger.info("Extracted %d teams", len(teams))
        return teams

    def list_eligible_versions(self, team: str) -> list[str]:
        """
        Versions the team can sort.

        Counts the team's cards per version and keeps only versions with at
        least `min_cards` cards. Versions are returned in the order they
        first appear in the Cards sheet.
        """
        tables = self._cards_table(VERSIONS_SHEET)
        team = normalize_value(team)

        counts: dict[str, int] = {}
        for row in tables[CARDS_SHEET].rows:
            if row[CARD_TEAM] == team and row[CARD_VERSION]:
                counts[row[CARD_VERSION]] = counts.get(row[CARD_VERSION], 0) + 1

        versions = [name for name, count in counts.items() if count >= self.min_cards]
        logger.info("Team %s: version counts %s, eligible %s", team, counts, versions)
        return versions

    def list_cards(self, team: str, version: str) -> list[Card]:
        """
        Cards for a team + version.

        Returns an empty list when nothing matches. When a project name
        appears more than once for the same team + version, only its first
        row is used.
        """
        table = self._cards_table()[CARDS_SHEET]
        team = normalize_value(team)
        version = normalize_value(version)

        cards: dict[str, Card] = {}
        for row in table.rows:
            if row[CARD_TEAM] != team or row[CARD_VERSION] != version:
                continue
            card = record_to_card(row)
            if card.id in cards:
                logger.warning(
                    "Duplicate project %r for team %s version %s, keeping first row",
                    card.id,
                    team,
                    version,
                )
                continue
            cards[card.id] = card

        if not cards:
            logger.warning("No cards found for team %s and version %s", team, version)
        else:
            logger.info("Found %d cards for team %s and version %s", len(cards), team, version)
        return list(cards.values())

    def overview(self) -> QSortOverview:
        """All version names from the Versions sheet plus every card grouped by version."""
        tables = self._cards_table(VERSIONS_SHEET)
        versions_table = tables[VERSIONS_SHEET]
        versions_table.require(VERSION_NAME)

        overview = QSortOverview(
            versions=[row[VERSION_NAME] for row in versions_table.rows if row[VERSION_NAME]]
        )
        for row in tables[CARDS_SHEET].rows:
            overview.cards.setdefault(row[CARD_VERSION], []).append(record_to_card(row))
        return overview
