"""보상 티어 도메인 모델"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

DEFAULT_TIER_WEIGHTS: tuple[int, ...] = (40, 30, 20, 8, 2)
EXPECTED_WEIGHT_TOTAL = 100


class Distribution(str, Enum):
    """허용 티어 목록에서 뽑는 방식"""

    EVEN = "even"  # 순환 배분
    RANDOM = "random"  # 매 회 무작위


@dataclass(frozen=True)
class RewardTier:
    """티어 하나. candidates의 None은 비어 있는 자리."""

    weight: int
    candidates: tuple[Optional[str], ...] = ()

    def valid_candidates(self) -> list[str]:
        return [key for key in self.candidates if key is not None]


@dataclass(frozen=True)
class RewardTierCatalog:
    """티어 목록. 티어 번호는 1부터."""

    tiers: tuple[RewardTier, ...]

    @property
    def tier_count(self) -> int:
        return len(self.tiers)

    @property
    def total_weight(self) -> int:
        return sum(max(0, tier.weight) for tier in self.tiers)

    def tier(self, index: int) -> Optional[RewardTier]:
        """1-based 조회. 범위 밖이면 None."""
        if 1 <= index <= len(self.tiers):
            return self.tiers[index - 1]
        return None


@dataclass
class RewardPolicy:
    """전투(조우)별 보상 설정"""

    count: int = 1
    allowed_tiers: list[int] = field(default_factory=list)  # 비어 있으면 전역 가중치
    distribution: Distribution = Distribution.RANDOM
    forced_rewards: list[str] = field(default_factory=list)  # 항상 추가
