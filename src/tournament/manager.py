"""Round progression for a tournament.

Every operation takes a Tournament and returns a new one; the caller decides
when to persist it. The pairing strategy is picked from PAIRING_GENERATORS by
the tournament mode, so adding a mode never touches the round logic below.
"""
import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from fixed_pairs.functions import generate_fixed_pairs_matches
from six_loco.functions import generate_six_loco_matches
from tournament.exceptions import MatchNotFound, NoRoundsYet, RoundInProgress, TournamentNotActive, UnknownMode
from tournament.models import (
    MODE_FIXED_PAIRS, MODE_SIX_LOCO, STATUS_ACTIVE, STATUS_COMPLETED,
    Match, Round, Score, Tournament,
)
from tournament.scoring import calculate_pair_points, calculate_player_stats, validate_score

logger = logging.getLogger(__name__)

PAIRING_GENERATORS: Dict[str, Callable[[Tournament], List[Match]]] = {
    MODE_SIX_LOCO: generate_six_loco_matches,
    MODE_FIXED_PAIRS: generate_fixed_pairs_matches,
}


def generate_matches(tournament: Tournament) -> List[Match]:
    try:
        generator = PAIRING_GENERATORS[tournament.mode]
    except KeyError:
        raise UnknownMode(f"Unknown tournament mode {tournament.mode!r}") from None
    return generator(tournament)


def get_current_round(tournament: Tournament) -> Optional[Round]:
    if not tournament.rounds:
        return None
    return tournament.rounds[tournament.current_round]


def can_start_new_round(tournament: Tournament) -> bool:
    if tournament.status != STATUS_ACTIVE:
        return False
    current = get_current_round(tournament)
    return current is None or current.completed


def start_new_round(tournament: Tournament) -> Tournament:
    if tournament.status != STATUS_ACTIVE:
        raise TournamentNotActive(tournament.status)

    current = get_current_round(tournament)
    if current is not None and not current.completed:
        raise RoundInProgress(current.number)

    matches = generate_matches(tournament)
    number = len(tournament.rounds) + 1
    new_round = Round(id=f"round-{number}", number=number, matches=matches)

    logger.info("Tournament %s: round %d started with %d matches", tournament.id, number, len(matches))
    return replace(
        tournament,
        rounds=[*tournament.rounds, new_round],
        current_round=number - 1,
    )


def record_result(
    tournament: Tournament,
    match_id: str,
    result: str,
    score: Optional[Score] = None,
) -> Tournament:
    """
    Set the result of a match in the current round and refresh every player's stats.
    Calling it again for the same match overwrites the previous result.
    """
    validate_score(result, score)

    found = False
    rounds = []
    for rnd in tournament.rounds:
        if rnd.number == tournament.current_round + 1:
            matches = []
            for match in rnd.matches:
                if match.id == match_id:
                    match = replace(match, result=result, completed=True, score=score)
                    found = True
                matches.append(match)
            rnd = replace(rnd, matches=matches, completed=all(m.completed for m in matches))
        rounds.append(rnd)

    if not found:
        raise MatchNotFound(match_id)

    players = calculate_player_stats(rounds, tournament.players)
    pairs = calculate_pair_points(tournament.pairs, players)

    logger.info("Tournament %s: match %s recorded as %s", tournament.id, match_id, result)
    return replace(tournament, rounds=rounds, players=players, pairs=pairs)


def finish_tournament(tournament: Tournament) -> Tournament:
    if tournament.status != STATUS_ACTIVE:
        raise TournamentNotActive(tournament.status)

    current = get_current_round(tournament)
    if current is None:
        raise NoRoundsYet()
    if not current.completed:
        raise RoundInProgress(current.number)

    logger.info("Tournament %s finished after %d rounds", tournament.id, len(tournament.rounds))
    return replace(tournament, status=STATUS_COMPLETED)
