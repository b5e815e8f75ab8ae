import logging
import random
from typing import List

from tournament.history import opposed_before
from tournament.models import Match, Pair, Tournament, generate_id

logger = logging.getLogger(__name__)


def replay_round(tournament: Tournament) -> List[Match]:
    """
    Re-emit the matchups of an earlier round as fresh matches.
    The round replayed is `completed rounds % number of rounds`, in creation order.
    """
    rounds = tournament.rounds
    rounds_completed = sum(1 for r in rounds if r.completed)
    source = rounds[rounds_completed % len(rounds)]

    logger.warning(
        "Not enough new opponents in tournament %s, replaying matchups of round %d",
        tournament.id, source.number,
    )
    return [
        Match(id=generate_id(), court=court, pair1=m.pair1, pair2=m.pair2)
        for court, m in enumerate(source.matches, start=1)
    ]


def generate_fixed_pairs_matches(tournament: Tournament) -> List[Match]:
    """
    Fixed pairs keep their partners; only the opponents rotate.
    Each pair at the head of the queue meets a random pair it has not faced yet,
    or the next pair in line when every remaining one has already been faced.
    """
    pairs: List[Pair] = list(tournament.pairs or [])
    queue = list(pairs)

    matches = []
    while len(queue) >= 2:
        pair1 = queue.pop(0)

        fresh = [p for p in queue if not opposed_before(pair1.id, p.id, tournament.rounds)]
        if fresh:
            pair2 = random.choice(fresh)
            queue.remove(pair2)
        else:
            logger.debug("Pair %s has faced every remaining pair, repeating", pair1.id)
            pair2 = queue.pop(0)

        matches.append(Match(
            id=generate_id(),
            court=len(matches) + 1,
            pair1=pair1,
            pair2=pair2,
        ))

    if len(matches) < len(pairs) / 2 and tournament.rounds:
        return replay_round(tournament)

    return matches
