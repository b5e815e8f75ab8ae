"""
Tests for saving and loading tournaments and profiles through SQLAlchemy.
"""
import asyncio

from database import AsyncSessionLocal
from tournament.manager import record_result, start_new_round
from tournament.models import PlayerProfile, Score
from tournament.repository import ProfileRepository, TournamentRepository


def _run(coro_fn, *args):
    async def _go():
        async with AsyncSessionLocal() as session:
            return await coro_fn(session, *args)
    return asyncio.run(_go())


async def _save(session, t):
    await TournamentRepository(session).save(t)


async def _load(session, tid):
    return await TournamentRepository(session).load(tid)


async def _list(session):
    return await TournamentRepository(session).list()


async def _delete(session, tid):
    return await TournamentRepository(session).delete(tid)


def test_round_trip_fixed_pairs(db, builders):
    t = start_new_round(builders.fixed_pairs(4))
    match = t.rounds[0].matches[0]
    t = record_result(t, match.id, "pair1", Score(5, 2))
    _run(_save, t)

    loaded = _run(_load, t.id)
    assert loaded.mode == "fixed-pairs"
    assert loaded.status == "active"
    assert [p.id for p in loaded.pairs] == ["pair-1", "pair-2", "pair-3", "pair-4"]
    assert list(loaded.players) == list(t.players)
    assert loaded.players == t.players
    assert loaded.current_round == 0
    assert len(loaded.rounds) == 1
    assert not loaded.rounds[0].completed

    saved_match = next(m for m in loaded.rounds[0].matches if m.id == match.id)
    assert saved_match.result == "pair1"
    assert saved_match.score == Score(5, 2)
    assert saved_match.pair1.members == match.pair1.members
    assert saved_match.pair2.id == match.pair2.id


def test_save_twice_adds_rounds(db, builders):
    t = start_new_round(builders.six_loco(4))
    _run(_save, t)

    t = record_result(t, t.rounds[0].matches[0].id, "draw")
    t = start_new_round(t)
    _run(_save, t)

    loaded = _run(_load, t.id)
    assert [r.number for r in loaded.rounds] == [1, 2]
    assert loaded.rounds[0].completed
    assert loaded.current_round == 1
    assert all(p.draws == 1 for p in loaded.players.values())


def test_pair_points_saved(db, builders):
    t = start_new_round(builders.fixed_pairs(2))
    t = record_result(t, t.rounds[0].matches[0].id, "pair1")
    _run(_save, t)

    loaded = _run(_load, t.id)
    assert sorted(p.points for p in loaded.pairs) == [0, 4]


def test_six_loco_has_no_pairs(db, builders):
    t = builders.six_loco(4)
    _run(_save, t)
    loaded = _run(_load, t.id)
    assert loaded.pairs is None
    assert loaded.rounds == []


def test_list_and_delete(db, builders):
    _run(_save, builders.six_loco(4))
    _run(_save, builders.fixed_pairs(2))

    assert sorted(t.id for t in _run(_list)) == ["t-fixed", "t-six"]
    assert _run(_delete, "t-six") is True
    assert _run(_delete, "t-six") is False
    assert _run(_load, "t-six") is None
    assert [t.id for t in _run(_list)] == ["t-fixed"]


def test_profiles(db):
    async def _scenario(session):
        repo = ProfileRepository(session)
        await repo.save(PlayerProfile(id="prof-1", name="Ana", category="Cuarta", phone="600"))
        await repo.save(PlayerProfile(id="prof-2", name="Luis", category="Tercera"))
        first = await repo.load("prof-1")
        deleted = await repo.delete("prof-2")
        remaining = await repo.list()
        return first, deleted, remaining

    first, deleted, remaining = _run(_scenario)
    assert (first.name, first.category, first.phone) == ("Ana", "Cuarta", "600")
    assert deleted is True
    assert [p.id for p in remaining] == ["prof-1"]
