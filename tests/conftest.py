from pathlib import Path
from typing import Any

import pandas as pd
import pytest

CARD_COLUMNS = ["Team Name", "Version", "Project Name", "MW", "Technology", "Sub-RTO"]


def card_rows(
    team: Any, version: Any, count: int, technology: str = "Solar"
) -> list[dict[str, Any]]:
    """`count` distinct card records for a team + version."""
    return [
        {
            "Team Name": team,
            "Version": version,
            "Project Name": f"Project {version}{i}",
            "MW": 100 + i,
            "Technology": technology,
            "Sub-RTO": "North",
        }
        for i in range(count)
    ]


def write_workbook(
    path: Path,
    teams: list[Any] | None = None,
    versions: list[Any] | None = None,
    cards: list[dict[str, Any]] | None = None,
    omit: tuple[str, ...] = (),
) -> Path:
    """Write a survey workbook; sheets named in `omit` are left out."""
    sheets = {
        "Teams": pd.DataFrame({"Team Name": teams or []}),
        "Versions": pd.DataFrame({"Version Name": versions or []}),
        "Cards": pd.DataFrame(cards or [], columns=CARD_COLUMNS),
    }
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, frame in sheets.items():
            if name not in omit:
                frame.to_excel(writer, sheet_name=name, index=False)
    return path


@pytest.fixture
def workbook_path(tmp_path: Path) -> Path:
    """
    Sample workbook.

    Team 1: V1 has 5 cards, V2 has 4, V3 has 6.
    Team 2: version 3 (typed as a number) has 5 cards.
    """
    cards = (
        card_rows(1, "V1", 5)
        + card_rows(1, "V2", 4, technology="Wind")
        + card_rows(2, 3, 5, technology="Storage")
        + card_rows(1, "V3", 6)
    )
    return write_workbook(
        tmp_path / "qsort_details.xlsx",
        teams=[1, 2, "North", 1],
        versions=["V1", "V2", 3, "V3"],
        cards=cards,
    )
