"""아이템 인스턴스 저장 포맷 — "archetypeKey|level"

instance_id는 포맷에 포함되지 않는다. 저장소(슬롯 행)가 별도로 보관하고
복원 시 deserialize()에 넘겨준다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .models import MAX_LEVEL, MIN_LEVEL, ItemInstance, new_instance_id
from .registry import ArchetypeRegistry

logger = logging.getLogger(__name__)

SEPARATOR = "|"
EMPTY_SLOT = ""  # 빈 슬롯 표식


@dataclass(frozen=True)
class DecodeResult:
    """복원 결과. ok=False면 instance는 None이고 reason에 사유."""

    ok: bool
    instance: Optional[ItemInstance] = None
    reason: str = ""

    @classmethod
    def invalid(cls, reason: str) -> DecodeResult:
        return cls(ok=False, instance=None, reason=reason)


def serialize(instance: ItemInstance) -> str:
    return f"{instance.archetype_key}{SEPARATOR}{instance.level}"


def is_empty_slot(text: Optional[str]) -> bool:
    return text is None or text == EMPTY_SLOT


def deserialize(
    text: str,
    registry: ArchetypeRegistry,
    instance_id: Optional[str] = None,
) -> DecodeResult:
    """문자열 → ItemInstance. 예외 없이 실패 사유를 돌려준다.

    실패 조건:
    - 빈 문자열 (빈 슬롯은 인스턴스가 아니다)
    - 필드 수가 정확히 2개가 아님
    - level이 정수가 아님
    - registry에 없는 key
    범위를 벗어난 level은 실패가 아니라 보정 대상.
    """
    if not text:
        return DecodeResult.invalid("empty")

    parts = text.split(SEPARATOR)
    if len(parts) != 2:
        return DecodeResult.invalid(f"expected 2 fields, got {len(parts)}")

    key, raw_level = parts
    try:
        level = int(raw_level)
    except ValueError:
        return DecodeResult.invalid(f"invalid level: {raw_level!r}")

    if registry.get(key) is None:
        return DecodeResult.invalid(f"unknown archetype: {key}")

    clamped = max(MIN_LEVEL, min(MAX_LEVEL, level))
    if clamped != level:
        logger.warning("Decoded level %d for %s clamped to %d", level, key, clamped)

    instance = ItemInstance(
        archetype_key=key,
        level=clamped,
        instance_id=instance_id or new_instance_id(),
    )
    return DecodeResult(ok=True, instance=instance)
