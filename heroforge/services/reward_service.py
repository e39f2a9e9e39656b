"""보상 Service — 보상 생성 후 인벤토리에 지급

Service → Core, Service → DB 허용
Service → Service 금지, EventBus 경유
"""

import random
from typing import Optional

from sqlalchemy.orm import Session

from heroforge.core.event_bus import EventBus, GameEvent
from heroforge.core.event_types import EventTypes
from heroforge.core.item.models import ItemArchetype, ItemInstance
from heroforge.core.item.registry import ArchetypeRegistry
from heroforge.core.logging import get_logger
from heroforge.core.loot.catalog import LootTable
from heroforge.core.loot.engine import generate_rewards, validate_policy
from heroforge.core.loot.models import RewardPolicy
from heroforge.db.repository import PlayerRepository

logger = get_logger(__name__)


class RewardService:
    """전투 보상 생성 + 지급"""

    def __init__(
        self,
        db: Session,
        event_bus: EventBus,
        registry: ArchetypeRegistry,
        loot_table: LootTable,
        inventory_size: int,
        rng: Optional[random.Random] = None,
    ):
        self._db = db
        self._bus = event_bus
        self._registry = registry
        self._loot = loot_table
        self._rng = rng or random.Random()
        self._repo = PlayerRepository(db, registry, inventory_size)

    def resolve_policy(self, encounter: str) -> RewardPolicy:
        """조우 이름 → 정책. 없으면 ValueError."""
        policy = self._loot.policy_for(encounter)
        if policy is None:
            raise ValueError(f"Unknown encounter: {encounter}")
        return policy

    def roll_rewards(self, policy: RewardPolicy) -> list[ItemArchetype]:
        """보상 목록만 생성 (지급 없음). 유효하지 않은 정책이면 빈 목록."""
        if not validate_policy(policy, self._loot.catalog.tier_count):
            return []
        rewards = generate_rewards(self._loot.catalog, policy, self._registry, self._rng)
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.REWARDS_GENERATED,
                data={
                    "count": len(rewards),
                    "archetype_keys": [a.key for a in rewards],
                },
                source="reward_service",
            )
        )
        return rewards

    def claim_rewards(
        self, player_id: str, policy: RewardPolicy, currency: int = 0
    ) -> dict:
        """보상 생성 → 레벨 1 인스턴스로 인벤토리에 추가.

        인벤토리가 가득 차면 남은 보상은 overflow로 보고 (예외 아님).
        currency > 0이면 함께 지급.
        """
        player = self._repo.get(player_id)
        if not validate_policy(policy, self._loot.catalog.tier_count):
            return {
                "success": False,
                "reason": "invalid_policy",
                "granted": [],
                "overflow": [],
                "currency": player.currency,
            }

        rewards = self.roll_rewards(policy)
        inventory = self._repo.load_inventory(player)

        granted: list[ItemInstance] = []
        overflow: list[str] = []
        for archetype in rewards:
            instance = ItemInstance(archetype_key=archetype.key)
            if inventory.add(instance) < 0:
                overflow.append(archetype.key)
                continue
            granted.append(instance)

        if overflow:
            logger.warning(
                "Inventory full for %s, %d rewards not granted", player_id, len(overflow)
            )

        ledger = self._repo.load_ledger(player)
        ledger.add(currency)
        self._repo.store_ledger(player, ledger)
        self._repo.store_inventory(player, inventory)
        self._db.commit()

        for instance in granted:
            self._bus.emit(
                GameEvent(
                    event_type=EventTypes.ITEM_CREATED,
                    data={
                        "player_id": player_id,
                        "instance_id": instance.instance_id,
                        "archetype_key": instance.archetype_key,
                    },
                    source="reward_service",
                )
            )
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.REWARDS_CLAIMED,
                data={
                    "player_id": player_id,
                    "granted": len(granted),
                    "overflow": len(overflow),
                    "currency": currency,
                },
                source="reward_service",
            )
        )

        return {
            "success": True,
            "reason": None,
            "granted": [
                {
                    "instance_id": i.instance_id,
                    "archetype_key": i.archetype_key,
                    "level": i.level,
                }
                for i in granted
            ],
            "overflow": overflow,
            "currency": ledger.balance,
        }

    def claim_encounter(self, player_id: str, encounter: str, currency: int = 0) -> dict:
        """조우 이름으로 보상 지급."""
        return self.claim_rewards(player_id, self.resolve_policy(encounter), currency)
