"""Errors raised by the tournament core.

Routers turn these into HTTP errors; the core itself never builds user-facing text
beyond the exception message.
"""


class TournamentError(Exception):
    """Base class for every tournament precondition violation."""


class InvalidRosterSize(TournamentError):
    def __init__(self, size: int):
        super().__init__(f"Roster size must be a positive multiple of 4, got {size}")
        self.size = size


class InvalidPairs(TournamentError):
    pass


class InvalidCourts(TournamentError):
    pass


class RoundInProgress(TournamentError):
    def __init__(self, number: int):
        super().__init__(f"Round {number} still has open matches")
        self.number = number


class NoRoundsYet(TournamentError):
    def __init__(self):
        super().__init__("No round has been played yet")


class TournamentNotActive(TournamentError):
    def __init__(self, status: str):
        super().__init__(f"Tournament is not active (status: {status})")
        self.status = status


class NotFound(TournamentError):
    pass


class MatchNotFound(NotFound):
    def __init__(self, match_id: str):
        super().__init__(f"Match {match_id} not found in the current round")
        self.match_id = match_id


class InvalidResult(TournamentError):
    pass


class InvalidScore(TournamentError):
    pass


class UnknownMode(TournamentError):
    pass


class InvalidProfile(TournamentError):
    pass
