# -*- coding: utf-8 -*-
"""
Database service with SQLAlchemy ORM support for both SQLite and PostgreSQL.
"""
import os
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, BigInteger, DateTime, Index, Integer, String, Text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from core.logger import get_logger
from domain.models import utcnow

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class BotUser(Base):
    """Telegram users of the bot."""
    __tablename__ = "bot_users"

    tg_user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    username: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    plan: Mapped[str] = mapped_column(String(16), nullable=False, default="free")
    pro_until: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    free_checks_left: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class DailyQuota(Base):
    """Free checks used by a user on a UTC day."""
    __tablename__ = "bot_quota_daily"

    tg_user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    day: Mapped[str] = mapped_column(String(10), primary_key=True)
    used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class InnCache(Base):
    """Last provider payload per INN."""
    __tablename__ = "inn_cache"

    inn: Mapped[str] = mapped_column(String(12), primary_key=True)
    provider: Mapped[str] = mapped_column(String(32), nullable=False)
    raw: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    record: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    summary: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    fetched_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class CheckLog(Base):
    """Append-only audit trail of lookups."""
    __tablename__ = "inn_checks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tg_user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    inn: Mapped[str] = mapped_column(String(12), nullable=False)
    provider: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    outcome: Mapped[str] = mapped_column(String(32), nullable=False)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ai_summary: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    __table_args__ = (
        Index("idx_inn_checks_user_id", "tg_user_id"),
        Index("idx_inn_checks_inn", "inn"),
        Index("idx_inn_checks_created_at", "created_at"),
    )


class DatabaseService:
    """Database service with async SQLAlchemy support."""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self._initialized = False

    @property
    def dialect(self) -> str:
        if self.engine is None:
            return self.database_url.split(":", 1)[0].split("+", 1)[0]
        return self.engine.dialect.name

    async def initialize(self):
        """Initialize database connection and create tables."""
        if self._initialized:
            return

        try:
            logger.info("Initializing database", dialect=self.dialect)

            engine_kwargs: Dict[str, Any] = {"echo": False, "pool_pre_ping": True}
            if self.dialect == "sqlite" and ":///" in self.database_url:
                db_path = self.database_url.split(":///", 1)[1]
                if db_path and db_path != ":memory:":
                    os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
            if self.dialect == "postgresql":
                engine_kwargs["pool_recycle"] = 3600
            self.engine = create_async_engine(self.database_url, **engine_kwargs)

            self.session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )

            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

            logger.info("Database initialized successfully")
            self._initialized = True

        except Exception as e:
            logger.error("Failed to initialize database", error=str(e))
            raise

    async def close(self):
        """Close database connections."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            self._initialized = False
            logger.info("Database connections closed")

    async def get_session(self) -> AsyncSession:
        """Get database session."""
        if not self._initialized:
            await self.initialize()
        return self.session_factory()
