"""상점 Service — 구매, 판매

Service → Core, Service → DB 허용
Service → Service 금지, EventBus 경유
"""

from sqlalchemy.orm import Session

from heroforge.core.event_bus import EventBus, GameEvent
from heroforge.core.event_types import EventTypes
from heroforge.core.item.models import ItemInstance
from heroforge.core.item.pricing import purchase_price, resale_price
from heroforge.core.item.registry import ArchetypeRegistry
from heroforge.core.logging import get_logger
from heroforge.db.repository import PlayerRepository

logger = get_logger(__name__)


class ShopService:
    """상점 거래. 실패는 success=False + reason으로 돌려준다."""

    def __init__(
        self,
        db: Session,
        event_bus: EventBus,
        registry: ArchetypeRegistry,
        inventory_size: int,
    ):
        self._db = db
        self._bus = event_bus
        self._registry = registry
        self._repo = PlayerRepository(db, registry, inventory_size)

    def list_stock(self) -> list[dict]:
        """판매 목록 = 전체 원형."""
        return [
            {
                "archetype_key": a.key,
                "display_name": a.display_name,
                "item_type": a.item_type.value,
                "rarity": a.rarity.value,
                "price": purchase_price(a),
            }
            for a in self._registry.get_all()
        ]

    def purchase(self, player_id: str, archetype_key: str) -> dict:
        """구매. 재화 부족, 인벤토리 가득 참이면 실패 (변경 없음)."""
        archetype = self._registry.get(archetype_key)
        if archetype is None:
            raise ValueError(f"Unknown archetype: {archetype_key}")

        player = self._repo.get(player_id)
        ledger = self._repo.load_ledger(player)
        inventory = self._repo.load_inventory(player)
        price = purchase_price(archetype)

        if not ledger.can_afford(price):
            return {"success": False, "reason": "insufficient_funds", "currency": ledger.balance}
        if not inventory.has_space():
            return {"success": False, "reason": "inventory_full", "currency": ledger.balance}

        instance = ItemInstance(archetype_key=archetype.key)
        slot = inventory.add(instance)
        ledger.subtract(price)

        self._repo.store_ledger(player, ledger)
        self._repo.store_inventory(player, inventory)
        self._db.commit()

        logger.info("Player %s bought %s for %d", player_id, archetype_key, price)
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.ITEM_PURCHASED,
                data={
                    "player_id": player_id,
                    "instance_id": instance.instance_id,
                    "archetype_key": archetype_key,
                    "price": price,
                },
                source="shop_service",
            )
        )
        return {
            "success": True,
            "reason": None,
            "currency": ledger.balance,
            "instance_id": instance.instance_id,
            "slot_index": slot,
        }

    def sell(self, player_id: str, instance_id: str) -> dict:
        """판매. 인스턴스 제거 후 되팔기 가격 지급."""
        player = self._repo.get(player_id)
        inventory = self._repo.load_inventory(player)
        slot = inventory.find(instance_id)
        if slot < 0:
            raise ValueError(f"Unknown item instance: {instance_id}")

        instance = inventory.get(slot)
        archetype = self._registry.get(instance.archetype_key)
        if archetype is None:
            raise ValueError(f"Unknown archetype: {instance.archetype_key}")

        price = resale_price(archetype, instance.level)
        inventory.remove(slot)
        ledger = self._repo.load_ledger(player)
        ledger.add(price)

        self._repo.store_ledger(player, ledger)
        self._repo.store_inventory(player, inventory)
        self._db.commit()

        logger.info(
            "Player %s sold %s (lv %d) for %d",
            player_id,
            instance.archetype_key,
            instance.level,
            price,
        )
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.ITEM_SOLD,
                data={
                    "player_id": player_id,
                    "instance_id": instance_id,
                    "archetype_key": instance.archetype_key,
                    "price": price,
                },
                source="shop_service",
            )
        )
        return {"success": True, "reason": None, "currency": ledger.balance, "price": price}
