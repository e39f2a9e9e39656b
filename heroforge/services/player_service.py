"""플레이어 Service — 프로필 생성/조회, 재화 지급

Service → Core, Service → DB 허용
Service → Service 금지, EventBus 경유
"""

from sqlalchemy.orm import Session

from heroforge.core.event_bus import EventBus, GameEvent
from heroforge.core.event_types import EventTypes
from heroforge.core.item.progression import stats_at_level
from heroforge.core.item.registry import ArchetypeRegistry
from heroforge.core.logging import get_logger
from heroforge.db.repository import PlayerRepository

logger = get_logger(__name__)


class PlayerService:
    """플레이어 프로필 관리"""

    def __init__(
        self,
        db: Session,
        event_bus: EventBus,
        registry: ArchetypeRegistry,
        inventory_size: int,
        starting_currency: int = 0,
        heal_legacy_energy: bool = False,
    ):
        self._db = db
        self._bus = event_bus
        self._registry = registry
        self._starting_currency = starting_currency
        self._repo = PlayerRepository(
            db, registry, inventory_size, heal_legacy_energy=heal_legacy_energy
        )

    def register_player(self, player_id: str) -> dict:
        """새 프로필 생성. 이미 있으면 ValueError."""
        self._repo.create(player_id, currency=self._starting_currency)
        self._db.commit()
        logger.info("Registered player %s", player_id)
        return self.get_profile(player_id)

    def get_profile(self, player_id: str) -> dict:
        """재화, 에너지, 인벤토리 요약."""
        player = self._repo.get(player_id)
        energy = self._repo.load_energy(player)
        inventory = self._repo.load_inventory(player)
        self._db.commit()

        items = []
        for slot_index, instance in inventory.items():
            archetype = self._registry.get(instance.archetype_key)
            items.append(
                {
                    "slot_index": slot_index,
                    "instance_id": instance.instance_id,
                    "archetype_key": instance.archetype_key,
                    "display_name": archetype.display_name if archetype else "",
                    "level": instance.level,
                    "stats": stats_at_level(archetype, instance.level).to_dict()
                    if archetype
                    else {},
                }
            )

        return {
            "player_id": player.player_id,
            "currency": player.currency,
            "energy": energy.energy,
            "is_sleeping": energy.is_sleeping,
            "inventory_capacity": inventory.capacity,
            "items": items,
        }

    def grant_currency(self, player_id: str, amount: int) -> int:
        """재화 지급. 음수는 무시(경고). 반환: 새 잔액."""
        player = self._repo.get(player_id)
        ledger = self._repo.load_ledger(player)
        before = ledger.balance
        ledger.add(amount)
        self._repo.store_ledger(player, ledger)
        self._db.commit()

        if ledger.balance != before:
            self._bus.emit(
                GameEvent(
                    event_type=EventTypes.CURRENCY_CHANGED,
                    data={
                        "player_id": player_id,
                        "delta": ledger.balance - before,
                        "balance": ledger.balance,
                    },
                    source="player_service",
                )
            )
        return ledger.balance
