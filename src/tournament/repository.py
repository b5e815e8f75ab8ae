"""Load and save Tournament records through the async SQLAlchemy session.

The core never touches the database: routers load a Tournament, hand it to
the manager and save whatever comes back.
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import MatchORM, PairORM, PlayerORM, PlayerProfileORM, TournamentORM
from tournament.models import MODE_FIXED_PAIRS, Match, Pair, Player, PlayerProfile, Round, Score, Tournament

logger = logging.getLogger(__name__)


def _orm_to_tournament(t_row: TournamentORM) -> Tournament:
    """Convert SQLAlchemy ORM object into the Tournament dataclass."""
    players = {
        p.id: Player(
            id=p.id, name=p.name, profile_id=p.profile_id,
            points=p.points, wins=p.wins,
            draws=p.draws, losses=p.losses,
        )
        for p in t_row.players
    }

    pairs = None
    if t_row.mode == MODE_FIXED_PAIRS:
        pairs = [
            Pair(id=p.id, player1=p.player1_id, player2=p.player2_id, points=p.points)
            for p in t_row.pairs
        ]

    max_round = max((m.round for m in t_row.matches), default=0)
    total = max(max_round, t_row.total_rounds)
    rounds = [Round(id=f"round-{n}", number=n) for n in range(1, total + 1)]
    for m in t_row.matches:
        score = None
        if m.score1 is not None and m.score2 is not None:
            score = Score(pair1_games=m.score1, pair2_games=m.score2)
        rounds[m.round - 1].matches.append(Match(
            id=m.id, court=m.court,
            pair1=Pair(id=m.pair1_id, player1=m.team1[0], player2=m.team1[1]),
            pair2=Pair(id=m.pair2_id, player1=m.team2[0], player2=m.team2[1]),
            result=m.result, completed=m.completed, score=score,
        ))
    for rnd in rounds:
        rnd.completed = all(m.completed for m in rnd.matches)

    return Tournament(
        id=t_row.id, name=t_row.name, mode=t_row.mode,
        courts=t_row.courts, category=t_row.category,
        players=players, pairs=pairs, rounds=rounds,
        current_round=t_row.current_round,
        created_at=t_row.created_at,
        status=t_row.status,
    )


def _attach(collection, child) -> None:
    # children must hang off the parent collection or delete-orphan discards them
    if child not in collection:
        collection.append(child)


class TournamentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(self) -> List[Tournament]:
        result = await self.session.execute(
            select(TournamentORM).order_by(TournamentORM.created_at.desc())
        )
        return [_orm_to_tournament(row) for row in result.scalars().all()]

    async def load(self, tid: str) -> Optional[Tournament]:
        row = await self.session.get(TournamentORM, tid, populate_existing=True)
        if row is None:
            return None
        return _orm_to_tournament(row)

    async def save(self, tournament: Tournament) -> None:
        session = self.session
        row = await session.get(TournamentORM, tournament.id)
        if row is None:
            row = TournamentORM(id=tournament.id, created_at=tournament.created_at)
            session.add(row)

        row.mode = tournament.mode
        row.name = tournament.name
        row.category = tournament.category
        row.courts = tournament.courts
        row.status = tournament.status
        row.current_round = tournament.current_round
        row.total_rounds = len(tournament.rounds)

        for p in list(row.players):
            if p.id not in tournament.players:
                row.players.remove(p)

        for position, p in enumerate(tournament.players.values()):
            _attach(row.players, await session.merge(PlayerORM(
                id=p.id, tournament_id=tournament.id, position=position,
                name=p.name, profile_id=p.profile_id,
                points=p.points, wins=p.wins, draws=p.draws, losses=p.losses,
            )))

        for position, pair in enumerate(tournament.pairs or []):
            _attach(row.pairs, await session.merge(PairORM(
                id=pair.id, tournament_id=tournament.id, position=position,
                player1_id=pair.player1, player2_id=pair.player2, points=pair.points,
            )))

        for rnd in tournament.rounds:
            for m in rnd.matches:
                _attach(row.matches, await session.merge(MatchORM(
                    id=m.id, tournament_id=tournament.id,
                    round=rnd.number, court=m.court,
                    pair1_id=m.pair1.id, pair2_id=m.pair2.id,
                    team1=list(m.pair1.members), team2=list(m.pair2.members),
                    result=m.result, completed=m.completed,
                    score1=m.score.pair1_games if m.score else None,
                    score2=m.score.pair2_games if m.score else None,
                )))

        await session.commit()
        logger.debug("Saved tournament %s (%d rounds)", tournament.id, len(tournament.rounds))

    async def delete(self, tid: str) -> bool:
        row = await self.session.get(TournamentORM, tid)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.commit()
        return True


def _orm_to_profile(row: PlayerProfileORM) -> PlayerProfile:
    return PlayerProfile(
        id=row.id, name=row.name, category=row.category,
        phone=row.phone, email=row.email, id_number=row.id_number,
        created_at=row.created_at,
    )


class ProfileRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(self) -> List[PlayerProfile]:
        result = await self.session.execute(select(PlayerProfileORM))
        return [_orm_to_profile(row) for row in result.scalars().all()]

    async def load(self, pid: str) -> Optional[PlayerProfile]:
        row = await self.session.get(PlayerProfileORM, pid, populate_existing=True)
        return _orm_to_profile(row) if row else None

    async def save(self, profile: PlayerProfile) -> None:
        await self.session.merge(PlayerProfileORM(
            id=profile.id, name=profile.name, category=profile.category,
            phone=profile.phone, email=profile.email, id_number=profile.id_number,
            created_at=profile.created_at,
        ))
        await self.session.commit()

    async def delete(self, pid: str) -> bool:
        row = await self.session.get(PlayerProfileORM, pid)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.commit()
        return True
