from typing import List

from tournament.models import Round


def partnered_before(player_a: str, player_b: str, rounds: List[Round]) -> bool:
    """True if the two players shared a pair in any earlier match."""
    target = {player_a, player_b}
    return any(
        set(pair.members) == target
        for rnd in rounds
        for match in rnd.matches
        for pair in (match.pair1, match.pair2)
    )


def opposed_before(pair_a: str, pair_b: str, rounds: List[Round]) -> bool:
    """True if the two pair ids met on opposite sides in any earlier match."""
    target = {pair_a, pair_b}
    return any(
        {match.pair1.id, match.pair2.id} == target
        for rnd in rounds
        for match in rnd.matches
    )
