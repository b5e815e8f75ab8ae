"""Building a tournament from a roster before the first round.

This is where roster rules are enforced, so the round logic can assume a
valid tournament.
"""
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from tournament.exceptions import InvalidCourts, InvalidPairs, InvalidRosterSize, UnknownMode
from tournament.models import (
    DEFAULT_CATEGORY, MODE_FIXED_PAIRS, MODE_LABELS, MODE_SIX_LOCO, MODES,
    STATUS_ACTIVE, STATUS_SETUP,
    Pair, Player, PlayerProfile, Tournament, generate_id,
)


def new_player(name: str, profile_id: Optional[str] = None) -> Player:
    return Player(id=generate_id(), name=name.strip(), profile_id=profile_id)


def player_from_profile(profile: PlayerProfile) -> Player:
    return new_player(profile.name, profile_id=profile.id)


def make_pair(player_a: Player, player_b: Player, index: int) -> Pair:
    if player_a.id == player_b.id:
        raise InvalidPairs(f"{player_a.name} cannot be paired with themselves")
    return Pair(id=f"pair-{index}", player1=player_a.id, player2=player_b.id)


def required_players(mode: str, courts: int) -> Optional[int]:
    """Players needed to fill every court; only fixed for 6 LOCO."""
    if mode == MODE_SIX_LOCO:
        return courts * 4
    return None


def validate_roster(players: Dict[str, Player]) -> None:
    if not players or len(players) % 4 != 0:
        raise InvalidRosterSize(len(players))


def validate_pairs(pairs: List[Pair], players: Dict[str, Player]) -> None:
    if len(pairs) < 2 or len(pairs) % 2 != 0:
        raise InvalidPairs(f"Fixed pairs need an even number of pairs (at least 2), got {len(pairs)}")

    seen = set()
    for pair in pairs:
        for pid in pair.members:
            if pid not in players:
                raise InvalidPairs(f"Pair {pair.id} references unknown player {pid}")
            if pid in seen:
                raise InvalidPairs(f"Player {players[pid].name} belongs to more than one pair")
            seen.add(pid)

    unpaired = [p.name for pid, p in players.items() if pid not in seen]
    if unpaired:
        raise InvalidPairs(f"Players without a pair: {', '.join(unpaired)}")


def create_tournament(
    mode: str,
    players: Iterable[Player],
    courts: int,
    name: str = "",
    category: str = "",
    pairs: Optional[List[Pair]] = None,
) -> Tournament:
    if mode not in MODES:
        raise UnknownMode(f"Unknown tournament mode {mode!r}")
    if courts < 1:
        raise InvalidCourts(f"At least one court is required, got {courts}")

    roster = {p.id: p for p in players}
    if mode == MODE_SIX_LOCO:
        validate_roster(roster)
        pairs = None
    else:
        validate_pairs(pairs or [], roster)

    category = category.strip() or DEFAULT_CATEGORY
    name = name.strip() or f"{MODE_LABELS[mode]} - {category}"

    return Tournament(
        id=generate_id(),
        name=name,
        mode=mode,
        courts=courts,
        category=category,
        players=roster,
        pairs=list(pairs) if mode == MODE_FIXED_PAIRS else None,
        status=STATUS_SETUP,
    )


def start_tournament(tournament: Tournament) -> Tournament:
    return replace(tournament, status=STATUS_ACTIVE)
