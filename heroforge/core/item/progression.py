"""아이템 성장 — 레벨별 스탯, 레벨업

레벨당 보너스 계수는 잠정값이다. 계수를 바꾸더라도
레벨에 대해 단조 비감소, 원형+레벨의 순수 함수라는 조건은 유지해야 한다.
"""

import logging

from .models import MAX_LEVEL, MIN_LEVEL, ItemArchetype, ItemInstance, StatBundle

logger = logging.getLogger(__name__)

# 스탯별 "N레벨당 +1" 분모
LEVEL_BONUS_DIVISORS: dict[str, int] = {
    "hp": 1,
    "mana": 1,
    "attack": 1,
    "defense": 1,
    "attack_speed": 2,
    "dexterity": 2,
    "luck": 3,
    "crit_chance": 5,
    "crit_damage": 5,
}


def clamp_level(level: int) -> int:
    """[MIN_LEVEL, MAX_LEVEL] 범위로 보정."""
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


def level_bonus(level: int) -> StatBundle:
    """레벨 1 대비 추가 스탯. 레벨 1이면 전부 0."""
    steps = clamp_level(level) - MIN_LEVEL
    return StatBundle(
        **{name: steps // divisor for name, divisor in LEVEL_BONUS_DIVISORS.items()}
    )


def stats_at_level(archetype: ItemArchetype, level: int) -> StatBundle:
    """원형 기본 스탯 + 레벨 보너스."""
    if clamp_level(level) == MIN_LEVEL:
        return archetype.base_stats
    return archetype.base_stats + level_bonus(level)


def set_level(instance: ItemInstance, level: int) -> None:
    """직접 지정 (범위 보정). 저장 데이터 로드용."""
    clamped = clamp_level(level)
    if clamped != level:
        logger.warning(
            "Level %d out of range for %s, clamped to %d",
            level,
            instance.instance_id,
            clamped,
        )
    if clamped != instance.level:
        instance.level = clamped
        instance.version += 1


def level_up(instance: ItemInstance) -> bool:
    """레벨 +1. 이미 최대 레벨이면 False (변경 없음)."""
    if instance.level >= MAX_LEVEL:
        return False
    instance.level += 1
    instance.version += 1
    return True
