import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Depends
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from database import init_db
from fixed_pairs.router import router as fixed_pairs_router
from players.router import router as players_router
from six_loco.router import router as six_loco_router
from tournament.models import MODE_LABELS
from tournament.repository import TournamentRepository
from tournament.router import get_repository, router as tournament_router

BASE_DIR = Path(__file__).resolve().parent

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("Database ready")
    yield


app = FastAPI(title="Padel Six-Crazys", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")
templates = Jinja2Templates(directory=BASE_DIR / "templates")

app.include_router(six_loco_router)
app.include_router(fixed_pairs_router)
app.include_router(tournament_router)
app.include_router(players_router)

# Routes

@app.get("/", response_class=HTMLResponse)
async def index(request: Request, repo: TournamentRepository = Depends(get_repository)):
    return templates.TemplateResponse(request, "index.html", {
        "tournaments": await repo.list(),
        "mode_labels": MODE_LABELS,
    })
