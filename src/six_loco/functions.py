import logging
import random
from typing import List

from tournament.exceptions import InvalidRosterSize
from tournament.history import partnered_before
from tournament.models import Match, Pair, Player, Tournament, generate_id

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 100


def generate_random_pairs(players: List[Player]) -> List[Pair]:
    """Shuffle the roster and cut it into consecutive pairs of two."""
    shuffled = list(players)
    random.shuffle(shuffled)
    return [
        Pair(id=generate_id(), player1=shuffled[i].id, player2=shuffled[i + 1].id)
        for i in range(0, len(shuffled) - 1, 2)
    ]


def generate_six_loco_matches(tournament: Tournament) -> List[Match]:
    """
    Generate a 6 LOCO round: brand new random partnerships every round.
    Up to MAX_ATTEMPTS shuffles are tried looking for a partition where nobody
    repeats a partner; if none is found the last shuffle is used as is.
    """
    players = list(tournament.players.values())
    if not players or len(players) % 4 != 0:
        raise InvalidRosterSize(len(players))

    pairs: List[Pair] = []
    for attempt in range(1, MAX_ATTEMPTS + 1):
        pairs = generate_random_pairs(players)
        if not any(partnered_before(p.player1, p.player2, tournament.rounds) for p in pairs):
            logger.debug("Repeat-free partnerships found on attempt %d", attempt)
            break
    else:
        logger.warning(
            "No repeat-free partnerships after %d attempts for tournament %s, repeating partners",
            MAX_ATTEMPTS, tournament.id,
        )

    matches = []
    court = 1
    for i in range(0, len(pairs) - 1, 2):
        matches.append(Match(
            id=generate_id(),
            court=court,
            pair1=pairs[i],
            pair2=pairs[i + 1],
        ))
        court += 1

    return matches
