import logging
from pathlib import Path
from typing import List

from fastapi import APIRouter, Form, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session
from players.functions import available_profiles, list_categories, pick_profiles
from tournament.exceptions import TournamentError
from tournament.models import MODE_LABELS, MODE_SIX_LOCO
from tournament.repository import ProfileRepository, TournamentRepository
from tournament.router import raise_http
from tournament.setup import (
    create_tournament, new_player, required_players, start_tournament,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/six-loco', tags=['6 Loco'])
templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")


@router.get("/", response_class=HTMLResponse)
async def six_loco_index(
    request: Request,
    category: str = "",
    q: str = "",
    session: AsyncSession = Depends(get_session),
):
    profiles = await ProfileRepository(session).list()
    return templates.TemplateResponse(request, "setup.html", {
        "mode": MODE_SIX_LOCO,
        "mode_label": MODE_LABELS[MODE_SIX_LOCO],
        "action": "/six-loco/create",
        "categories": list_categories(profiles),
        "category": category,
        "profiles": available_profiles(profiles, [], category=category, term=q),
        "per_court": required_players(MODE_SIX_LOCO, 1),
    })


@router.post("/create")
async def create_six_loco(
    name: str = Form(""),
    category: str = Form(""),
    courts: int = Form(1),
    player_names: str = Form(""),
    profile_ids: List[str] = Form([]),
    session: AsyncSession = Depends(get_session),
):
    players = pick_profiles(await ProfileRepository(session).list(), profile_ids)
    players.extend(new_player(n) for n in player_names.split("\n") if n.strip())

    try:
        t = start_tournament(create_tournament(
            MODE_SIX_LOCO, players, courts, name=name, category=category,
        ))
    except TournamentError as exc:
        raise_http(exc)

    await TournamentRepository(session).save(t)
    logger.info("Created 6 LOCO tournament %s with %d players", t.id, len(t.players))
    return RedirectResponse(f"/tournaments/{t.id}", status_code=303)
