import os
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from dotenv import load_dotenv
from asyncpg import Connection
from uuid import uuid4
from sqlalchemy import (
    JSON, Boolean, Column, ForeignKey, Integer, String,
    func, DateTime,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.pool import NullPool

load_dotenv()

POSTGRES_USER = os.getenv("POSTGRES_USER")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD")
POSTGRES_DB = os.getenv("POSTGRES_DB_URL")

class Base(DeclarativeBase): pass

postgres_file_name = f"{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_DB}"

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{postgres_file_name}"
    )

SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")

_is_sqlite = DATABASE_URL.startswith("sqlite")

class FixedConnection(Connection):
    def _get_unique_id(self, prefix: str) -> str:
        return f'__asyncpg_{prefix}_{uuid4()}__'


if _is_sqlite:
    engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO, poolclass=NullPool)
else:
    engine = create_async_engine(
        DATABASE_URL,
        echo=SQL_ECHO,
        future=True,
        connect_args={
            "statement_cache_size": 0,
            "prepared_statement_cache_size": 0,
            "connection_class": FixedConnection,
        }
    )

# Session factory
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


async def get_session():
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

# JSONB on postgres, plain JSON elsewhere
IdList = JSON().with_variant(JSONB(), "postgresql")

#ORM

class TournamentORM(Base):
    __tablename__ = "tournaments"

    id            = Column(String, primary_key=True)
    mode          = Column(String, nullable=False, default="6-loco")  # 6-loco | fixed-pairs
    name          = Column(String, nullable=False)
    category      = Column(String, nullable=False, default="")
    courts        = Column(Integer, nullable=False)
    status        = Column(String, nullable=False, default="setup")
    current_round = Column(Integer, nullable=False, default=0)
    total_rounds  = Column(Integer, nullable=False, default=0)
    created_at    = Column(DateTime(timezone=True), server_default=func.now())

    players = relationship(
        "PlayerORM",
        back_populates="tournament",
        cascade="all, delete-orphan",
        order_by="PlayerORM.position",
        lazy="selectin",
    )
    pairs = relationship(
        "PairORM",
        back_populates="tournament",
        cascade="all, delete-orphan",
        order_by="PairORM.position",
        lazy="selectin",
    )
    matches = relationship(
        "MatchORM",
        back_populates="tournament",
        cascade="all, delete-orphan",
        order_by="[MatchORM.round, MatchORM.court]",
        lazy="selectin",
    )


class PlayerORM(Base):
    __tablename__ = "players"

    id            = Column(String, primary_key=True)
    tournament_id = Column(String, ForeignKey("tournaments.id", ondelete="CASCADE"), primary_key=True)
    position      = Column(Integer, nullable=False, default=0)
    name          = Column(String, nullable=False)
    profile_id    = Column(String, nullable=True)  # player_profiles.id, lookup only
    points        = Column(Integer, nullable=False, default=0)
    wins          = Column(Integer, nullable=False, default=0)
    draws         = Column(Integer, nullable=False, default=0)
    losses        = Column(Integer, nullable=False, default=0)

    tournament = relationship("TournamentORM", back_populates="players")


class PairORM(Base):
    __tablename__ = "pairs"

    id            = Column(String, primary_key=True)
    tournament_id = Column(String, ForeignKey("tournaments.id", ondelete="CASCADE"), primary_key=True)
    position      = Column(Integer, nullable=False, default=0)
    player1_id    = Column(String, nullable=False)
    player2_id    = Column(String, nullable=False)
    points        = Column(Integer, nullable=False, default=0)

    tournament = relationship("TournamentORM", back_populates="pairs")


class MatchORM(Base):
    __tablename__ = "matches"

    id            = Column(String, primary_key=True)
    tournament_id = Column(String, ForeignKey("tournaments.id", ondelete="CASCADE"), primary_key=True)
    round         = Column(Integer, nullable=False)
    court         = Column(Integer, nullable=False)
    pair1_id      = Column(String, nullable=False)
    pair2_id      = Column(String, nullable=False)
    team1         = Column(IdList, nullable=False)   # list[str] -- player ids
    team2         = Column(IdList, nullable=False)
    result        = Column(String, nullable=True)    # pair1 | pair2 | draw
    score1        = Column(Integer, nullable=True)
    score2        = Column(Integer, nullable=True)
    completed     = Column(Boolean, nullable=False, default=False)

    tournament = relationship("TournamentORM", back_populates="matches")


class PlayerProfileORM(Base):
    __tablename__ = "player_profiles"

    id            = Column(String, primary_key=True)
    name          = Column(String, nullable=False)
    phone         = Column(String, nullable=False, default="")
    email         = Column(String, nullable=False, default="")
    id_number     = Column(String, nullable=False, default="")
    category      = Column(String, nullable=False)
    created_at    = Column(DateTime(timezone=True), server_default=func.now())
