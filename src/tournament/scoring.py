from dataclasses import replace
from typing import Dict, List, Optional

from tournament.exceptions import InvalidResult, InvalidScore
from tournament.models import (
    RESULT_DRAW, RESULT_PAIR1, RESULT_PAIR2, RESULTS,
    Pair, Player, Round, Score, Tournament,
)

WIN_POINTS = 2
DRAW_POINTS = 1
LOSS_POINTS = 0

# Every detailed score is a race to a fixed total of games.
GAMES_PER_MATCH = 7


def calculate_player_stats(rounds: List[Round], players: Dict[str, Player]) -> Dict[str, Player]:
    """
    Rebuild every player's points/wins/draws/losses from the full round history.
    Totals are never adjusted incrementally, so editing a result cannot double count.
    """
    updated = {}
    for pid, player in players.items():
        points = wins = draws = losses = 0

        for rnd in rounds:
            for match in rnd.matches:
                if not match.completed or not match.result:
                    continue

                in_pair1 = match.pair1.has_player(pid)
                in_pair2 = match.pair2.has_player(pid)
                if not (in_pair1 or in_pair2):
                    continue

                if match.result == RESULT_DRAW:
                    points += DRAW_POINTS
                    draws += 1
                elif (match.result == RESULT_PAIR1 and in_pair1) or (match.result == RESULT_PAIR2 and in_pair2):
                    points += WIN_POINTS
                    wins += 1
                else:
                    points += LOSS_POINTS
                    losses += 1

        updated[pid] = replace(player, points=points, wins=wins, draws=draws, losses=losses)
    return updated


def calculate_pair_points(pairs: Optional[List[Pair]], players: Dict[str, Player]) -> Optional[List[Pair]]:
    if pairs is None:
        return None
    return [
        replace(pair, points=sum(players[pid].points for pid in pair.members if pid in players))
        for pair in pairs
    ]


def validate_score(result: str, score: Optional[Score]) -> None:
    # draws carry whatever score was supplied
    if result not in RESULTS:
        raise InvalidResult(f"Unknown result {result!r}")
    if score is None or result == RESULT_DRAW:
        return

    if result_from_score(score) != result:
        raise InvalidScore(f"Score {score.pair1_games}-{score.pair2_games} does not match result {result}")


def result_from_score(score: Score) -> str:
    """Winner of a detailed score. The total is odd, so there is always one."""
    if score.pair1_games < 0 or score.pair2_games < 0:
        raise InvalidScore("Game counts cannot be negative")
    if score.pair1_games + score.pair2_games != GAMES_PER_MATCH:
        raise InvalidScore(
            f"Score {score.pair1_games}-{score.pair2_games} must add up to {GAMES_PER_MATCH} games"
        )
    return RESULT_PAIR1 if score.pair1_games > score.pair2_games else RESULT_PAIR2


def calculate_standings(tournament: Tournament) -> List[dict]:
    standings = []
    for pid, player in tournament.players.items():
        standings.append({
            "id": pid,
            "name": player.name,
            "points": player.points,
            "wins": player.wins,
            "draws": player.draws,
            "losses": player.losses,
        })
    standings.sort(key=lambda x: (-x["points"], -x["wins"], x["losses"]))
    for i, s in enumerate(standings):
        s["rank"] = i + 1
    return standings


def calculate_pair_standings(tournament: Tournament) -> List[dict]:
    """Pair table for fixed-pairs tournaments; totals come from the members' stats."""
    if not tournament.pairs:
        return []

    players = tournament.players
    standings = []
    for pair in tournament.pairs:
        members = [players[pid] for pid in pair.members if pid in players]
        standings.append({
            "id": pair.id,
            "name": " & ".join(p.name for p in members),
            "points": sum(p.points for p in members),
            "wins": sum(p.wins for p in members),
            "losses": sum(p.losses for p in members),
        })
    standings.sort(key=lambda x: (-x["points"], -x["wins"], x["losses"]))
    for i, s in enumerate(standings):
        s["rank"] = i + 1
    return standings
