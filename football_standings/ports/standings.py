from typing import List, Optional, Protocol, TypedDict


class Team(TypedDict):
    id: int
    name: str
    shortName: str
    tla: str
    crest: str


class TableEntry(TypedDict):
    position: int
    team: Team
    playedGames: int
    won: int
    draw: int
    lost: int
    points: int
    goalsFor: int
    goalsAgainst: int
    goalDifference: int


class StandingGroup(TypedDict):
    stage: str
    type: str
    group: Optional[str]
    table: List[TableEntry]


class Competition(TypedDict):
    id: int
    name: str
    code: str
    emblem: str


class StandingsDocument(TypedDict):
    competition: Competition
    standings: List[StandingGroup]


class StandingsPort(Protocol):
    def fetch_standings(self, competition_id: str) -> StandingsDocument: ...
