"""상점 가격 계산 — 구매가, 되팔기 가격"""

from .models import MIN_LEVEL, ItemArchetype
from .progression import clamp_level

# 레벨 1 초과분마다 기준가의 1/20(5%) 가산 (잠정값)
RESALE_LEVEL_DIVISOR = 20


def purchase_price(archetype: ItemArchetype) -> int:
    """구매가 = 원형 기준가. 최소 0."""
    return max(0, archetype.price)


def resale_price(archetype: ItemArchetype, level: int) -> int:
    """되팔기 가격. 최소 1.

    base = max(1, price // 2)
    base * (1 + (level - 1) * 0.05), 0.5는 올림. 정수 연산으로 계산.
    """
    base = max(1, archetype.price // 2)
    steps = clamp_level(level) - MIN_LEVEL
    numerator = base * (RESALE_LEVEL_DIVISOR + steps)
    return max(1, (2 * numerator + RESALE_LEVEL_DIVISOR) // (2 * RESALE_LEVEL_DIVISOR))
