"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from heroforge.api.game import router as game_router
from heroforge.api.health import router as health_router
from heroforge.config import settings
from heroforge.core.event_bus import EventBus
from heroforge.core.forge.economy import CostCurve
from heroforge.core.item.registry import ArchetypeRegistry
from heroforge.core.logging import get_logger, setup_logging
from heroforge.core.loot.catalog import load_catalog_from_json, validate_catalog
from heroforge.db.database import SessionLocal, engine as db_engine
from heroforge.db.models import Base
from heroforge.services.energy_service import EnergyService
from heroforge.services.forge_service import ForgeService
from heroforge.services.player_service import PlayerService
from heroforge.services.reward_service import RewardService
from heroforge.services.shop_service import ShopService

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # DB 테이블 생성
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=db_engine)
    logger.info("Database tables created.")

    # 콘텐츠 데이터 로드
    registry = ArchetypeRegistry.load_from_json(settings.ARCHETYPE_DATA_PATH)
    loot_table = load_catalog_from_json(settings.REWARD_TIER_DATA_PATH)
    if not validate_catalog(loot_table.catalog, registry):
        logger.warning("Reward tier catalog is invalid, generation will degrade")

    curve = CostCurve(
        base_cost=settings.FORGE_BASE_COST,
        cost_multiplier=settings.FORGE_COST_MULTIPLIER,
        max_level=settings.FORGE_MAX_LEVEL,
    )

    # 서비스 초기화
    logger.info("Initializing services...")
    event_bus = EventBus()
    db_session = SessionLocal()
    app.state.event_bus = event_bus
    app.state.registry = registry
    app.state.player_service = PlayerService(
        db=db_session,
        event_bus=event_bus,
        registry=registry,
        inventory_size=settings.INVENTORY_SIZE,
        starting_currency=settings.STARTING_CURRENCY,
        heal_legacy_energy=settings.ENERGY_HEAL_LEGACY_VALUES,
    )
    app.state.reward_service = RewardService(
        db=db_session,
        event_bus=event_bus,
        registry=registry,
        loot_table=loot_table,
        inventory_size=settings.INVENTORY_SIZE,
    )
    app.state.forge_service = ForgeService(
        db=db_session,
        event_bus=event_bus,
        registry=registry,
        curve=curve,
        inventory_size=settings.INVENTORY_SIZE,
    )
    app.state.energy_service = EnergyService(
        db=db_session,
        event_bus=event_bus,
        registry=registry,
        heal_legacy_energy=settings.ENERGY_HEAL_LEGACY_VALUES,
    )
    app.state.shop_service = ShopService(
        db=db_session,
        event_bus=event_bus,
        registry=registry,
        inventory_size=settings.INVENTORY_SIZE,
    )
    logger.info("Services initialized (%d archetypes).", registry.count())

    yield

    # 종료 시 정리
    logger.info("Shutting down...")
    db_session.close()


app = FastAPI(title="heroforge", lifespan=lifespan)

app.include_router(health_router)
app.include_router(game_router)
