from pathlib import Path

from fastapi import APIRouter, Form, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session
from players.functions import create_profile, list_categories, search_profiles, update_profile, whatsapp_link
from tournament.exceptions import TournamentError
from tournament.repository import ProfileRepository
from tournament.router import raise_http

router = APIRouter(prefix='/players', tags=['Jugadores'])
templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")


async def get_profiles(session: AsyncSession = Depends(get_session)) -> ProfileRepository:
    return ProfileRepository(session)


@router.get("/", response_class=HTMLResponse)
async def players_index(
    request: Request,
    q: str = "",
    category: str = "",
    repo: ProfileRepository = Depends(get_profiles),
):
    profiles = await repo.list()
    found = search_profiles(profiles, q, category)
    return templates.TemplateResponse(request, "players.html", {
        "profiles": found,
        "total": len(profiles),
        "links": {p.id: whatsapp_link(p) for p in found},
        "categories": list_categories(profiles),
        "q": q,
        "category": category,
    })


@router.post("/create")
async def create_player(
    name: str = Form(""),
    category: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    id_number: str = Form(""),
    repo: ProfileRepository = Depends(get_profiles),
):
    try:
        profile = create_profile(name, category, phone=phone, email=email, id_number=id_number)
    except TournamentError as exc:
        raise_http(exc)

    await repo.save(profile)
    return RedirectResponse("/players/", status_code=303)


@router.post("/{pid}/edit")
async def edit_player(
    pid: str,
    name: str = Form(""),
    category: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    id_number: str = Form(""),
    repo: ProfileRepository = Depends(get_profiles),
):
    profile = await repo.load(pid)
    if not profile:
        raise HTTPException(status_code=404, detail="Player not found")
    try:
        profile = update_profile(profile, name, category, phone=phone, email=email, id_number=id_number)
    except TournamentError as exc:
        raise_http(exc)

    await repo.save(profile)
    return RedirectResponse("/players/", status_code=303)


@router.post("/{pid}/delete")
async def delete_player(pid: str, repo: ProfileRepository = Depends(get_profiles)):
    await repo.delete(pid)
    return RedirectResponse("/players/", status_code=303)
