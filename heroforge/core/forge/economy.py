"""강화 경제 — 비용 곡선, 원자적 강화 거래, 미리보기"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from heroforge.core.item.models import MAX_LEVEL, ItemArchetype, ItemInstance, StatBundle
from heroforge.core.item.progression import level_up, stats_at_level

from .ledger import CurrencyLedger

logger = logging.getLogger(__name__)

DEFAULT_BASE_COST = 100
DEFAULT_COST_MULTIPLIER = 1.2


class ImproveFailure(str, Enum):
    ALREADY_MAX = "already_max"
    INSUFFICIENT_FUNDS = "insufficient_funds"


@dataclass(frozen=True)
class CostCurve:
    """cost(level) = round(base_cost * level ^ cost_multiplier)"""

    base_cost: int = DEFAULT_BASE_COST
    cost_multiplier: float = DEFAULT_COST_MULTIPLIER
    max_level: int = MAX_LEVEL

    def cost(self, level: int) -> int:
        """레벨 1 미만은 1로 취급. 0.5는 올림."""
        level = max(1, level)
        return int(self.base_cost * level**self.cost_multiplier + 0.5)

    def can_improve(self, level: int) -> bool:
        return level < self.max_level


@dataclass(frozen=True)
class ImproveResult:
    """강화 결과. 실패 시 reason이 채워지고 잔액/레벨은 호출 전 그대로."""

    success: bool
    new_balance: int
    new_level: int
    cost: Optional[int] = None
    reason: Optional[ImproveFailure] = None


@dataclass(frozen=True)
class ImprovementInfo:
    """강화 UI 표시용 요약"""

    level: int
    max_level: int
    can_improve: bool
    cost: Optional[int]  # 최대 레벨이면 None
    affordable: bool
    current_stats: StatBundle
    projected_stats: StatBundle


def improve(
    instance: ItemInstance,
    ledger: CurrencyLedger,
    curve: CostCurve = CostCurve(),
) -> ImproveResult:
    """재화 차감 + 레벨업. 둘 다 일어나거나 둘 다 일어나지 않는다.

    1. 최대 레벨 → ALREADY_MAX
    2. 잔액 < 비용 → INSUFFICIENT_FUNDS
    3. 차감 후 level_up
    """
    if not curve.can_improve(instance.level):
        return ImproveResult(
            success=False,
            new_balance=ledger.balance,
            new_level=instance.level,
            reason=ImproveFailure.ALREADY_MAX,
        )

    cost = curve.cost(instance.level)
    if not ledger.can_afford(cost):
        return ImproveResult(
            success=False,
            new_balance=ledger.balance,
            new_level=instance.level,
            cost=cost,
            reason=ImproveFailure.INSUFFICIENT_FUNDS,
        )

    ledger.subtract(cost)
    if not level_up(instance):
        # curve.max_level이 MAX_LEVEL보다 큰 잘못된 설정
        ledger.add(cost)
        logger.error(
            "Level up rejected for %s at level %d, refunded %d",
            instance.instance_id,
            instance.level,
            cost,
        )
        return ImproveResult(
            success=False,
            new_balance=ledger.balance,
            new_level=instance.level,
            cost=cost,
            reason=ImproveFailure.ALREADY_MAX,
        )

    logger.info(
        "Improved %s (%s) to level %d for %d",
        instance.instance_id,
        instance.archetype_key,
        instance.level,
        cost,
    )
    return ImproveResult(
        success=True,
        new_balance=ledger.balance,
        new_level=instance.level,
        cost=cost,
    )


def projected_stats(
    instance: ItemInstance,
    archetype: ItemArchetype,
    curve: CostCurve = CostCurve(),
) -> StatBundle:
    """다음 레벨 스탯 (최대 레벨이면 현재). 인스턴스는 바꾸지 않는다."""
    return stats_at_level(archetype, min(instance.level + 1, curve.max_level))


def improvement_info(
    instance: ItemInstance,
    archetype: ItemArchetype,
    ledger: CurrencyLedger,
    curve: CostCurve = CostCurve(),
) -> ImprovementInfo:
    can = curve.can_improve(instance.level)
    cost = curve.cost(instance.level) if can else None
    return ImprovementInfo(
        level=instance.level,
        max_level=curve.max_level,
        can_improve=can,
        cost=cost,
        affordable=cost is not None and ledger.can_afford(cost),
        current_stats=stats_at_level(archetype, instance.level),
        projected_stats=projected_stats(instance, archetype, curve),
    )
