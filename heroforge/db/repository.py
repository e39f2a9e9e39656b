"""플레이어 저장 레코드 ↔ Core 객체 변환

서비스들이 공통으로 쓰는 DB 접근. Service → Service 호출 대신 이 모듈을 공유한다.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from heroforge.core.energy.machine import EnergyStateMachine
from heroforge.core.energy.models import LEGACY_CORRUPT_ENERGY, MAX_ENERGY, EnergyProfile
from heroforge.core.forge.ledger import CurrencyLedger
from heroforge.core.item.codec import deserialize, serialize
from heroforge.core.item.inventory import DEFAULT_CAPACITY, Inventory
from heroforge.core.item.registry import ArchetypeRegistry
from heroforge.core.logging import get_logger
from heroforge.db.models import InventorySlotModel, PlayerModel

logger = get_logger(__name__)


class PlayerRepository:
    """players / inventory_slots 테이블 접근"""

    def __init__(
        self,
        db: Session,
        registry: ArchetypeRegistry,
        inventory_size: int = DEFAULT_CAPACITY,
        heal_legacy_energy: bool = False,
    ):
        self._db = db
        self._registry = registry
        self._inventory_size = inventory_size
        self._corrupt_energy = LEGACY_CORRUPT_ENERGY if heal_legacy_energy else ()

    # === Player ===

    def find(self, player_id: str) -> PlayerModel | None:
        return (
            self._db.query(PlayerModel)
            .filter(PlayerModel.player_id == player_id)
            .first()
        )

    def get(self, player_id: str) -> PlayerModel:
        """없으면 ValueError."""
        player = self.find(player_id)
        if player is None:
            raise ValueError(f"Unknown player: {player_id}")
        return player

    def create(self, player_id: str, currency: int = 0) -> PlayerModel:
        if self.find(player_id) is not None:
            raise ValueError(f"Player already exists: {player_id}")
        player = PlayerModel(
            player_id=player_id,
            currency=max(0, currency),
            current_energy=MAX_ENERGY,
            is_sleeping=False,
            last_sleep_at=None,
            created_at=datetime.now(timezone.utc),
        )
        self._db.add(player)
        self._db.flush()
        return player

    # === Currency ===

    def load_ledger(self, player: PlayerModel) -> CurrencyLedger:
        return CurrencyLedger(player.currency)

    def store_ledger(self, player: PlayerModel, ledger: CurrencyLedger) -> None:
        player.currency = ledger.balance

    # === Energy ===

    def load_energy(self, player: PlayerModel) -> EnergyStateMachine:
        profile = EnergyProfile(
            current_energy=player.current_energy,
            is_sleeping=player.is_sleeping,
            sleep_started_at=player.last_sleep_at,
            precise_energy=player.precise_energy,
        )
        machine = EnergyStateMachine.from_profile(profile, self._corrupt_energy)
        if machine.energy != player.current_energy or (
            machine.is_sleeping != player.is_sleeping
        ):
            logger.warning("Healed stored energy for player %s", player.player_id)
            self.store_energy(player, machine)
        return machine

    def store_energy(self, player: PlayerModel, machine: EnergyStateMachine) -> None:
        profile = machine.to_profile()
        player.current_energy = profile.current_energy
        player.is_sleeping = profile.is_sleeping
        player.last_sleep_at = profile.sleep_started_at
        player.precise_energy = profile.precise_energy

    # === Inventory ===

    def load_inventory(self, player: PlayerModel) -> Inventory:
        """슬롯 행 → Inventory.

        복원 실패한 행은 슬롯을 예약만 하고 행은 그대로 둔다 (경고).
        """
        inventory = Inventory(self._inventory_size)
        for row in player.slots:
            result = deserialize(row.encoded, self._registry, row.instance_id)
            if not result.ok:
                logger.warning(
                    "Player %s slot %d unresolved, kept as reserved: %r (%s)",
                    player.player_id,
                    row.slot_index,
                    row.encoded,
                    result.reason,
                )
                inventory.reserve(row.slot_index)
                continue
            if not inventory.place(row.slot_index, result.instance):
                logger.warning(
                    "Player %s slot %d out of range or duplicated",
                    player.player_id,
                    row.slot_index,
                )
        return inventory

    def store_inventory(self, player: PlayerModel, inventory: Inventory) -> None:
        """Inventory → 슬롯 행 동기화. 삭제를 먼저 flush해 슬롯 번호 충돌을 막는다.

        예약 슬롯과 용량 밖 슬롯의 행은 건드리지 않는다.
        """
        current = {index: instance for index, instance in inventory.items()}
        kept_ids = {instance.instance_id for instance in current.values()}

        existing: dict[str, InventorySlotModel] = {}
        for row in list(player.slots):
            if row.instance_id in kept_ids:
                existing[row.instance_id] = row
            elif inventory.is_reserved(row.slot_index) or not (
                0 <= row.slot_index < inventory.capacity
            ):
                continue
            else:
                player.slots.remove(row)
        self._db.flush()

        for index, instance in current.items():
            row = existing.get(instance.instance_id)
            if row is None:
                player.slots.append(
                    InventorySlotModel(
                        slot_index=index,
                        instance_id=instance.instance_id,
                        encoded=serialize(instance),
                    )
                )
            else:
                row.slot_index = index
                row.encoded = serialize(instance)
        self._db.flush()
