"""
Derived views over a standings document.
These never mutate the document passed in; it may be the cached object.
"""

from typing import Any, Dict, List, Optional

from .constants import (
    CHAMPIONS_LEAGUE_SPOTS,
    RELEGATION_OFFSET,
    TOTAL_STANDING_TYPE,
    ZONE_CHAMPIONS_LEAGUE,
    ZONE_RELEGATION,
)
from .ports.standings import StandingGroup, StandingsDocument, TableEntry


def select_total_table(document: StandingsDocument) -> Optional[StandingGroup]:
    """Return the overall table, falling back to the first group (cup stages have no TOTAL)."""
    groups = document.get("standings") or []
    for group in groups:
        if group.get("type") == TOTAL_STANDING_TYPE:
            return group
    return groups[0] if groups else None


def zone_for(position: int, table_size: int) -> Optional[str]:
    if position <= CHAMPIONS_LEAGUE_SPOTS:
        return ZONE_CHAMPIONS_LEAGUE
    if position >= table_size - RELEGATION_OFFSET:
        return ZONE_RELEGATION
    return None


def win_percentage(entry: TableEntry) -> float:
    played = entry.get("playedGames") or 0
    if played <= 0:
        return 0.0
    return round(entry.get("won", 0) / played * 100, 1)


def _team_view(entry: TableEntry) -> Dict[str, Any]:
    team = entry.get("team") or {}
    return {
        "id": team.get("id"),
        "name": team.get("name"),
        "shortName": team.get("shortName") or team.get("tla"),
        "crest": team.get("crest"),
    }


def team_stats(document: StandingsDocument) -> List[Dict[str, Any]]:
    """Per-team goal stats and win rate, best attack first."""
    group = select_total_table(document)
    if group is None:
        return []
    table = group.get("table") or []
    size = len(table)
    ranked = sorted(table, key=lambda e: e.get("goalsFor", 0), reverse=True)
    return [
        {
            "team": _team_view(entry),
            "goalsFor": entry.get("goalsFor", 0),
            "goalsAgainst": entry.get("goalsAgainst", 0),
            "goalDifference": entry.get("goalDifference", 0),
            "winPercentage": win_percentage(entry),
            "zone": zone_for(entry.get("position", 0), size),
        }
        for entry in ranked
    ]


def summarize(document: StandingsDocument) -> Dict[str, Any]:
    """Competition header, zone-annotated table and team stats in one payload."""
    group = select_total_table(document)
    table = (group or {}).get("table") or []
    size = len(table)
    return {
        "competition": document.get("competition") or {},
        "type": (group or {}).get("type"),
        "table": [
            {**entry, "zone": zone_for(entry.get("position", 0), size)}
            for entry in table
        ],
        "stats": team_stats(document),
    }
