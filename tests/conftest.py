# -*- coding: utf-8 -*-
"""
Общие фикстуры: файловая SQLite в tmp_path и репозитории поверх неё
"""
import pytest

from domain.models import UserIdentity
from domain.repository import CacheRepository, CheckLogRepository, QuotaRepository, UserRepository
from services.database import DatabaseService


@pytest.fixture
async def db(tmp_path):
    service = DatabaseService(f"sqlite+aiosqlite:///{tmp_path / 'bot.db'}")
    await service.initialize()
    yield service
    await service.close()


@pytest.fixture
def users(db):
    return UserRepository(db)


@pytest.fixture
def quotas(db):
    return QuotaRepository(db)


@pytest.fixture
def cache_repo(db):
    return CacheRepository(db)


@pytest.fixture
def check_log(db):
    return CheckLogRepository(db)


@pytest.fixture
def identity():
    return UserIdentity(id=1001, username="buh", first_name="Анна", last_name="Петрова")
