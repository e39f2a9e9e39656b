"""Shared test fixtures."""

import pytest
from sqlalchemy import create_engine, event as sa_event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from heroforge.config import DATA_DIR
from heroforge.core.event_bus import EventBus
from heroforge.core.item.registry import ArchetypeRegistry
from heroforge.core.loot.catalog import LootTable, load_catalog_from_json
from heroforge.db.models import Base

ARCHETYPES_PATH = DATA_DIR / "archetypes.json"
REWARD_TIERS_PATH = DATA_DIR / "reward_tiers.json"


@pytest.fixture()
def registry() -> ArchetypeRegistry:
    """기본 데이터(archetypes.json) 원형 저장소"""
    return ArchetypeRegistry.load_from_json(ARCHETYPES_PATH)


@pytest.fixture()
def loot_table() -> LootTable:
    return load_catalog_from_json(REWARD_TIERS_PATH)


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def db_session() -> Session:
    """인메모리 SQLite 세션 (FK 활성화)"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @sa_event.listens_for(engine, "connect")
    def _set_fk(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
