"""강화 Service — 비용 미리보기, 강화 거래 저장

Service → Core, Service → DB 허용
Service → Service 금지, EventBus 경유
"""

from sqlalchemy.orm import Session

from heroforge.core.event_bus import EventBus, GameEvent
from heroforge.core.event_types import EventTypes
from heroforge.core.forge.economy import (
    CostCurve,
    ImprovementInfo,
    ImproveResult,
    improve,
    improvement_info,
)
from heroforge.core.item.inventory import Inventory
from heroforge.core.item.models import ItemArchetype, ItemInstance
from heroforge.core.item.registry import ArchetypeRegistry
from heroforge.core.logging import get_logger
from heroforge.db.models import PlayerModel
from heroforge.db.repository import PlayerRepository

logger = get_logger(__name__)


class ForgeService:
    """아이템 강화"""

    def __init__(
        self,
        db: Session,
        event_bus: EventBus,
        registry: ArchetypeRegistry,
        curve: CostCurve,
        inventory_size: int,
    ):
        self._db = db
        self._bus = event_bus
        self._registry = registry
        self._curve = curve
        self._repo = PlayerRepository(db, registry, inventory_size)

    def _load_item(
        self, player: PlayerModel, instance_id: str
    ) -> tuple[Inventory, ItemInstance, ItemArchetype]:
        inventory = self._repo.load_inventory(player)
        slot = inventory.find(instance_id)
        if slot < 0:
            raise ValueError(f"Unknown item instance: {instance_id}")
        instance = inventory.get(slot)
        archetype = self._registry.get(instance.archetype_key)
        if archetype is None:
            raise ValueError(f"Unknown archetype: {instance.archetype_key}")
        return inventory, instance, archetype

    def preview(self, player_id: str, instance_id: str) -> ImprovementInfo:
        """현재/다음 레벨 스탯, 비용, 구매 가능 여부. 상태 변경 없음."""
        player = self._repo.get(player_id)
        _, instance, archetype = self._load_item(player, instance_id)
        ledger = self._repo.load_ledger(player)
        return improvement_info(instance, archetype, ledger, self._curve)

    def improve_item(self, player_id: str, instance_id: str) -> ImproveResult:
        """재화 차감 + 레벨업 후 저장. 실패하면 아무것도 저장하지 않는다."""
        player = self._repo.get(player_id)
        inventory, instance, _ = self._load_item(player, instance_id)
        ledger = self._repo.load_ledger(player)

        result = improve(instance, ledger, self._curve)
        if not result.success:
            logger.info(
                "Improve failed for %s/%s: %s",
                player_id,
                instance_id,
                result.reason.value,
            )
            self._bus.emit(
                GameEvent(
                    event_type=EventTypes.IMPROVEMENT_FAILED,
                    data={
                        "player_id": player_id,
                        "instance_id": instance_id,
                        "reason": result.reason.value,
                    },
                    source="forge_service",
                )
            )
            return result

        self._repo.store_ledger(player, ledger)
        self._repo.store_inventory(player, inventory)
        self._db.commit()

        self._bus.emit(
            GameEvent(
                event_type=EventTypes.ITEM_IMPROVED,
                data={
                    "player_id": player_id,
                    "instance_id": instance_id,
                    "new_level": result.new_level,
                    "cost": result.cost,
                },
                source="forge_service",
            )
        )
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.CURRENCY_CHANGED,
                data={
                    "player_id": player_id,
                    "delta": -result.cost,
                    "balance": result.new_balance,
                },
                source="forge_service",
            )
        )
        return result
