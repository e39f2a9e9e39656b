"""아이템 원형 저장소 — JSON 로드 시 1회 색인, 이후 읽기 전용"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Optional

from .models import ItemArchetype, ItemType, Rarity, StatBundle

logger = logging.getLogger(__name__)


def parse_archetype(raw: dict) -> ItemArchetype:
    """JSON 객체 → ItemArchetype. 필수 키 누락/잘못된 enum은 KeyError/ValueError."""
    return ItemArchetype(
        key=raw["key"],
        display_name=raw.get("display_name", raw["key"]),
        item_type=ItemType(raw.get("item_type", ItemType.OTHER.value)),
        rarity=Rarity(raw.get("rarity", Rarity.COMMON.value)),
        base_stats=StatBundle.from_dict(raw.get("base_stats", {})),
        price=int(raw.get("price", 0)),
        description=raw.get("description", ""),
    )


class ArchetypeRegistry:
    """
    아이템 원형 저장소.
    생성 시점에 key 색인을 만들고, 이후에는 조회만 허용한다.
    여러 서비스가 공유해도 안전하다.
    """

    def __init__(self, archetypes: Iterable[ItemArchetype] = ()) -> None:
        index: dict[str, ItemArchetype] = {}
        for archetype in archetypes:
            if archetype.key in index:
                logger.warning("Duplicate archetype key ignored: %s", archetype.key)
                continue
            index[archetype.key] = archetype
        self._archetypes = MappingProxyType(index)

    @classmethod
    def load_from_json(cls, path: str | Path) -> ArchetypeRegistry:
        """archetypes.json 로드.

        JSON 배열의 각 객체를 ItemArchetype으로 변환.
        잘못된 항목은 경고 로그 후 건너뛴다.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw_list: list[dict] = json.load(f)

        archetypes: list[ItemArchetype] = []
        for raw in raw_list:
            try:
                archetypes.append(parse_archetype(raw))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to load archetype: %s (%s)", raw.get("key", "?"), e
                )

        registry = cls(archetypes)
        logger.info("Loaded %d archetypes from %s", registry.count(), path)
        return registry

    def get(self, key: str) -> Optional[ItemArchetype]:
        """O(1) 조회. 없으면 None."""
        return self._archetypes.get(key)

    def get_all(self) -> list[ItemArchetype]:
        """전체 원형 반환 (로드 순서 유지)."""
        return list(self._archetypes.values())

    def by_type(self, item_type: ItemType) -> list[ItemArchetype]:
        return [a for a in self._archetypes.values() if a.item_type == item_type]

    def count(self) -> int:
        """등록된 원형 수."""
        return len(self._archetypes)

    def __contains__(self, key: object) -> bool:
        return key in self._archetypes
