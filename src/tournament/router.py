from pathlib import Path

from fastapi import APIRouter, Form, Depends, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session
from tournament.exceptions import NotFound, TournamentError
from tournament.manager import (
    can_start_new_round, finish_tournament, get_current_round,
    record_result, start_new_round,
)
from tournament.models import MODE_LABELS, Score, Tournament
from tournament.repository import TournamentRepository
from tournament.scoring import calculate_pair_standings, calculate_standings, result_from_score

router = APIRouter(prefix='/tournaments', tags=['Torneos'])
templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")

# -- Helpers -------------------------------------------------------------------

async def get_repository(session: AsyncSession = Depends(get_session)) -> TournamentRepository:
    return TournamentRepository(session)


async def _get_tournament(tid: str, repo: TournamentRepository) -> Tournament:
    t = await repo.load(tid)
    if not t:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return t


def raise_http(exc: TournamentError):
    status_code = 404 if isinstance(exc, NotFound) else 400
    raise HTTPException(status_code=status_code, detail=str(exc)) from exc


def _redirect(tid: str) -> RedirectResponse:
    return RedirectResponse(f"/tournaments/{tid}", status_code=303)


# Routes

@router.head("/{tid}")
async def tournament_head(tid: str, repo: TournamentRepository = Depends(get_repository)):
    await _get_tournament(tid, repo)
    return Response(status_code=200)


@router.get("/{tid}", response_class=HTMLResponse)
async def tournament_view(request: Request, tid: str, repo: TournamentRepository = Depends(get_repository)):
    t = await _get_tournament(tid, repo)

    return templates.TemplateResponse(request, "tournament.html", {
        "tournament": t,
        "mode_label": MODE_LABELS.get(t.mode, t.mode),
        "standings": calculate_standings(t),
        "pair_standings": calculate_pair_standings(t),
        "current_round": get_current_round(t),
        "can_start": can_start_new_round(t),
        "players": t.players,
        "rounds_completed": sum(1 for r in t.rounds if r.completed),
    })


@router.post("/{tid}/next-round")
async def next_round(tid: str, repo: TournamentRepository = Depends(get_repository)):
    t = await _get_tournament(tid, repo)
    try:
        t = start_new_round(t)
    except TournamentError as exc:
        raise_http(exc)

    await repo.save(t)
    return _redirect(tid)


@router.post("/{tid}/result")
async def submit_result(
    tid: str,
    match_id: str = Form(...),
    result: str = Form(...),
    repo: TournamentRepository = Depends(get_repository),
):
    t = await _get_tournament(tid, repo)
    try:
        t = record_result(t, match_id, result)
    except TournamentError as exc:
        raise_http(exc)

    await repo.save(t)
    return _redirect(tid)


@router.post("/{tid}/score")
async def submit_score(
    tid: str,
    match_id: str = Form(...),
    pair1_games: int = Form(...),
    pair2_games: int = Form(...),
    repo: TournamentRepository = Depends(get_repository),
):
    """Detailed score entry; also used to correct an already completed match."""
    t = await _get_tournament(tid, repo)
    score = Score(pair1_games=pair1_games, pair2_games=pair2_games)
    try:
        t = record_result(t, match_id, result_from_score(score), score)
    except TournamentError as exc:
        raise_http(exc)

    await repo.save(t)
    return _redirect(tid)


@router.post("/{tid}/finish")
async def finish(tid: str, repo: TournamentRepository = Depends(get_repository)):
    t = await _get_tournament(tid, repo)
    try:
        t = finish_tournament(t)
    except TournamentError as exc:
        raise_http(exc)

    await repo.save(t)
    return _redirect(tid)


@router.post("/{tid}/delete")
async def delete_tournament(tid: str, repo: TournamentRepository = Depends(get_repository)):
    await repo.delete(tid)
    return RedirectResponse("/", status_code=303)
