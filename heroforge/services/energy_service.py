"""에너지 Service — 수면/기상/사용/회복 tick 저장

Service → Core, Service → DB 허용
Service → Service 금지, EventBus 경유
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from heroforge.core.energy.machine import EnergyStateMachine
from heroforge.core.event_bus import EventBus, GameEvent
from heroforge.core.event_types import EventTypes
from heroforge.core.item.registry import ArchetypeRegistry
from heroforge.core.logging import get_logger
from heroforge.db.repository import PlayerRepository

logger = get_logger(__name__)


def _energy_dict(machine: EnergyStateMachine) -> dict:
    return {
        "energy": machine.energy,
        "state": machine.state.value,
        "is_sleeping": machine.is_sleeping,
    }


class EnergyService:
    """영웅 에너지 관리. 요청마다 저장 레코드에서 상태 머신을 복원한다."""

    def __init__(
        self,
        db: Session,
        event_bus: EventBus,
        registry: ArchetypeRegistry,
        heal_legacy_energy: bool = False,
    ):
        self._db = db
        self._bus = event_bus
        self._repo = PlayerRepository(
            db, registry, heal_legacy_energy=heal_legacy_energy
        )

    def get_energy(self, player_id: str) -> dict:
        player = self._repo.get(player_id)
        machine = self._repo.load_energy(player)
        self._db.commit()
        return _energy_dict(machine)

    def spend(self, player_id: str, amount: int) -> dict:
        """에너지 사용. 수면 중이었으면 먼저 깨운다."""
        player = self._repo.get(player_id)
        machine = self._repo.load_energy(player)
        was_sleeping = machine.is_sleeping

        success = machine.spend(amount)
        self._repo.store_energy(player, machine)
        self._db.commit()

        if was_sleeping:
            self._emit_woke(player_id, machine, reason="spend")
        if success:
            self._bus.emit(
                GameEvent(
                    event_type=EventTypes.ENERGY_SPENT,
                    data={
                        "player_id": player_id,
                        "amount": amount,
                        "energy": machine.energy,
                    },
                    source="energy_service",
                )
            )
        return {"success": success, **_energy_dict(machine)}

    def sleep(self, player_id: str, now: Optional[datetime] = None) -> dict:
        player = self._repo.get(player_id)
        machine = self._repo.load_energy(player)

        success = machine.start_sleep(now or datetime.now(timezone.utc))
        if success:
            self._repo.store_energy(player, machine)
            self._db.commit()
            self._bus.emit(
                GameEvent(
                    event_type=EventTypes.HERO_SLEPT,
                    data={"player_id": player_id, "energy": machine.energy},
                    source="energy_service",
                )
            )
        return {"success": success, **_energy_dict(machine)}

    def wake(self, player_id: str) -> dict:
        player = self._repo.get(player_id)
        machine = self._repo.load_energy(player)

        success = machine.wake_up()
        if success:
            self._repo.store_energy(player, machine)
            self._db.commit()
            self._emit_woke(player_id, machine, reason="manual")
        return {"success": success, **_energy_dict(machine)}

    def tick(self, player_id: str, elapsed_seconds: float) -> dict:
        """수면 회복. 호출자가 경과 시간을 넘긴다.

        소수 누적값도 저장되므로 짧은 간격으로 나눠 호출해도 합계가 같다.
        """
        player = self._repo.get(player_id)
        machine = self._repo.load_energy(player)

        woke = machine.tick(elapsed_seconds)
        self._repo.store_energy(player, machine)
        self._db.commit()

        if woke:
            self._emit_woke(player_id, machine, reason="recovered")
        return {"woke": woke, **_energy_dict(machine)}

    def _emit_woke(
        self, player_id: str, machine: EnergyStateMachine, reason: str
    ) -> None:
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.HERO_WOKE,
                data={
                    "player_id": player_id,
                    "energy": machine.energy,
                    "reason": reason,
                },
                source="energy_service",
            )
        )
