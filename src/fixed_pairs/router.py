import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

from fastapi import APIRouter, Form, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session
from players.functions import available_profiles, list_categories, pick_profiles
from tournament.exceptions import InvalidPairs, TournamentError
from tournament.models import MODE_FIXED_PAIRS, MODE_LABELS, Player
from tournament.repository import ProfileRepository, TournamentRepository
from tournament.router import raise_http
from tournament.setup import create_tournament, make_pair, new_player, start_tournament

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/fixed-pairs', tags=['Parejas Fijas'])
templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")

PAIR_SEPARATOR = re.compile(r"\s*[&/]\s*")


def _parse_pairs(text: str) -> List[Tuple[str, str]]:
    """One pair per line: "Ana & Luis" (or "Ana / Luis")."""
    pairs = []
    for line in text.split("\n"):
        if not line.strip():
            continue
        names = [n for n in PAIR_SEPARATOR.split(line.strip()) if n]
        if len(names) != 2:
            raise InvalidPairs(f"Cannot read a pair from {line.strip()!r}")
        pairs.append((names[0], names[1]))
    return pairs


def _claim(catalog: List[Player], name: str) -> Optional[Player]:
    """Take the ticked catalog player with this name, if any is still unpaired."""
    wanted = name.strip().lower()
    for player in catalog:
        if player.name.lower() == wanted:
            catalog.remove(player)
            return player
    return None


@router.get("/", response_class=HTMLResponse)
async def fixed_pairs_index(
    request: Request,
    category: str = "",
    q: str = "",
    session: AsyncSession = Depends(get_session),
):
    profiles = await ProfileRepository(session).list()
    return templates.TemplateResponse(request, "setup.html", {
        "mode": MODE_FIXED_PAIRS,
        "mode_label": MODE_LABELS[MODE_FIXED_PAIRS],
        "action": "/fixed-pairs/create",
        "categories": list_categories(profiles),
        "category": category,
        "profiles": available_profiles(profiles, [], category=category, term=q),
    })


@router.post("/create")
async def create_fixed_pairs(
    name: str = Form(""),
    category: str = Form(""),
    courts: int = Form(1),
    pairs: str = Form(""),
    profile_ids: List[str] = Form([]),
    session: AsyncSession = Depends(get_session),
):
    catalog = pick_profiles(await ProfileRepository(session).list(), profile_ids)
    try:
        players = []
        pair_list = []
        for index, (name_a, name_b) in enumerate(_parse_pairs(pairs), start=1):
            a = _claim(catalog, name_a) or new_player(name_a)
            b = _claim(catalog, name_b) or new_player(name_b)
            players.extend([a, b])
            pair_list.append(make_pair(a, b, index))
        # ticked but never named in a pair: reported as unpaired
        players.extend(catalog)

        t = start_tournament(create_tournament(
            MODE_FIXED_PAIRS, players, courts, name=name, category=category, pairs=pair_list,
        ))
    except TournamentError as exc:
        raise_http(exc)

    await TournamentRepository(session).save(t)
    logger.info("Created fixed-pairs tournament %s with %d pairs", t.id, len(t.pairs))
    return RedirectResponse(f"/tournaments/{t.id}", status_code=303)
