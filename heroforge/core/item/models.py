"""아이템 도메인 모델 (DB 무관)"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from enum import Enum

MIN_LEVEL = 1
MAX_LEVEL = 999


class ItemType(str, Enum):
    """장비 슬롯 분류"""

    MOUNT = "mount"
    HELMET = "helmet"
    NECKLACE = "necklace"
    WEAPON = "weapon"
    ARMOR = "armor"
    SHIELD = "shield"
    GLOVES = "gloves"
    BELT = "belt"
    RING = "ring"
    BOOTS = "boots"
    OTHER = "other"


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


@dataclass(frozen=True)
class StatBundle:
    """스탯 묶음 — 불변. 덧셈 지원."""

    hp: int = 0
    mana: int = 0
    attack: int = 0
    defense: int = 0
    attack_speed: int = 0
    crit_chance: int = 0
    crit_damage: int = 0
    luck: int = 0
    dexterity: int = 0

    def __add__(self, other: StatBundle) -> StatBundle:
        if not isinstance(other, StatBundle):
            return NotImplemented
        return StatBundle(
            **{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)}
        )

    def to_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, raw: dict) -> StatBundle:
        """알 수 없는 키는 무시, 누락된 키는 0."""
        return cls(**{f.name: int(raw.get(f.name, 0)) for f in fields(cls)})


@dataclass(frozen=True)
class ItemArchetype:
    """아이템 원형 — 불변. archetypes.json에서 로드."""

    key: str  # "Espada de Madera"
    display_name: str
    item_type: ItemType
    rarity: Rarity
    base_stats: StatBundle
    price: int  # 상점 기준가
    description: str = ""


def new_instance_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ItemInstance:
    """게임 내 아이템 개체. 원형은 key로만 참조한다.

    level 변경은 core.item.progression 함수를 통해서만.
    version은 레벨이 바뀔 때마다 증가한다.
    """

    archetype_key: str
    level: int = MIN_LEVEL
    instance_id: str = field(default_factory=new_instance_id)
    version: int = field(default=0, compare=False)
