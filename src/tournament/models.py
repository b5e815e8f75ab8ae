from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

MODE_SIX_LOCO = "6-loco"
MODE_FIXED_PAIRS = "fixed-pairs"
MODES = (MODE_SIX_LOCO, MODE_FIXED_PAIRS)
MODE_LABELS = {MODE_SIX_LOCO: "6 LOCO", MODE_FIXED_PAIRS: "Parejas Fijas"}

RESULT_PAIR1 = "pair1"
RESULT_PAIR2 = "pair2"
RESULT_DRAW = "draw"
RESULTS = (RESULT_PAIR1, RESULT_PAIR2, RESULT_DRAW)

STATUS_SETUP = "setup"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"

DEFAULT_CATEGORY = "Sin categoría"


def generate_id():
    import uuid
    return str(uuid.uuid4())[:8]


@dataclass
class PlayerProfile:
    id: str
    name: str
    category: str
    phone: str = ""
    email: str = ""
    id_number: str = ""
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class Player:
    id: str
    name: str
    points: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    profile_id: Optional[str] = None  # catalog lookup only


@dataclass
class Pair:
    id: str
    player1: str  # player ids
    player2: str
    points: int = 0

    @property
    def members(self) -> Tuple[str, str]:
        return (self.player1, self.player2)

    def has_player(self, player_id: str) -> bool:
        return player_id in self.members


@dataclass
class Score:
    pair1_games: int
    pair2_games: int


@dataclass
class Match:
    id: str
    court: int
    pair1: Pair
    pair2: Pair
    result: Optional[str] = None  # pair1, pair2, draw
    completed: bool = False
    score: Optional[Score] = None


@dataclass
class Round:
    id: str
    number: int  # 1-based
    matches: List[Match] = field(default_factory=list)
    completed: bool = False


@dataclass
class Tournament:
    id: str
    name: str
    mode: str  # 6-loco, fixed-pairs
    courts: int
    category: str = DEFAULT_CATEGORY
    players: Dict[str, Player] = field(default_factory=dict)  # id -> Player
    pairs: Optional[List[Pair]] = None  # fixed-pairs mode only
    rounds: List[Round] = field(default_factory=list)
    current_round: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    status: str = STATUS_SETUP  # setup, active, completed
