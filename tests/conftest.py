import asyncio
import os
import tempfile
import uuid
from pathlib import Path

import pytest

# Point the app at a throwaway SQLite file before `database` is imported anywhere.
TEST_DB = Path(tempfile.gettempdir()) / f"padel-test-{uuid.uuid4().hex}.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB}"

from fastapi.testclient import TestClient  # noqa: E402

from database import AsyncSessionLocal, Base, engine  # noqa: E402
from tournament.models import (  # noqa: E402
    MODE_FIXED_PAIRS, MODE_SIX_LOCO, STATUS_ACTIVE,
    Match, Pair, Player, Round, Tournament,
)
from tournament.repository import TournamentRepository  # noqa: E402


async def _reset_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture(name="db")
def db_fixture():
    """Fresh tables for every test that touches the database."""
    asyncio.run(_reset_db())
    yield
    TEST_DB.unlink(missing_ok=True)


@pytest.fixture(name="client")
def client_fixture(db):
    from main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture(name="load_tournament")
def load_tournament_fixture(db):
    """Read a tournament straight from the database, bypassing the routes."""
    async def _load(tid):
        async with AsyncSessionLocal() as session:
            return await TournamentRepository(session).load(tid)

    return lambda tid: asyncio.run(_load(tid))


def make_players(n: int) -> dict:
    return {f"p{i}": Player(id=f"p{i}", name=f"Player {i}") for i in range(1, n + 1)}


def make_match(match_id: str, pair1: Pair, pair2: Pair, result=None, court=1) -> Match:
    return Match(
        id=match_id, court=court, pair1=pair1, pair2=pair2,
        result=result, completed=result is not None,
    )


def make_round(number: int, matches, completed=None) -> Round:
    if completed is None:
        completed = all(m.completed for m in matches)
    return Round(id=f"round-{number}", number=number, matches=list(matches), completed=completed)


def six_loco_tournament(n_players: int = 4, rounds=None) -> Tournament:
    rounds = rounds or []
    return Tournament(
        id="t-six", name="6 LOCO - Test", mode=MODE_SIX_LOCO, courts=max(1, n_players // 4),
        players=make_players(n_players), rounds=rounds,
        current_round=max(0, len(rounds) - 1), status=STATUS_ACTIVE,
    )


def fixed_pairs_tournament(n_pairs: int = 4, rounds=None) -> Tournament:
    players = make_players(n_pairs * 2)
    pairs = [
        Pair(id=f"pair-{i}", player1=f"p{2 * i - 1}", player2=f"p{2 * i}")
        for i in range(1, n_pairs + 1)
    ]
    rounds = rounds or []
    return Tournament(
        id="t-fixed", name="Parejas Fijas - Test", mode=MODE_FIXED_PAIRS, courts=max(1, n_pairs // 2),
        players=players, pairs=pairs, rounds=rounds,
        current_round=max(0, len(rounds) - 1), status=STATUS_ACTIVE,
    )


@pytest.fixture
def builders():
    """Tournament builders shared by the core tests."""
    class Builders:
        players = staticmethod(make_players)
        match = staticmethod(make_match)
        round = staticmethod(make_round)
        six_loco = staticmethod(six_loco_tournament)
        fixed_pairs = staticmethod(fixed_pairs_tournament)

    return Builders
