"""보상 생성 엔진 — 가중치로 티어, 티어 안에서는 균등 추첨

rng는 호출자가 주입한다 (random.Random 또는 random 모듈).
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional

from heroforge.core.item.models import ItemArchetype
from heroforge.core.item.registry import ArchetypeRegistry

from .models import Distribution, RewardPolicy, RewardTierCatalog

logger = logging.getLogger(__name__)


def sample_tier(catalog: RewardTierCatalog, rng: Optional[random.Random] = None) -> int:
    """가중치 누적합으로 티어 선택. 반환: 1-based 티어 번호.

    구간은 [이전 누적합, 이전 누적합 + weight) 반개구간.
    가중치 합이 0이면 전체 티어에서 균등 선택.
    """
    rng = rng or random
    if catalog.tier_count == 0:
        raise ValueError("Reward tier catalog has no tiers")

    total = catalog.total_weight
    if total <= 0:
        logger.warning("Total tier weight is 0, falling back to uniform tier draw")
        return rng.randrange(catalog.tier_count) + 1

    draw = rng.randrange(total)
    cumulative = 0
    for index, tier in enumerate(catalog.tiers, start=1):
        cumulative += max(0, tier.weight)
        if draw < cumulative:
            return index
    return catalog.tier_count


def sample_item(
    catalog: RewardTierCatalog,
    tier_index: int,
    registry: ArchetypeRegistry,
    rng: Optional[random.Random] = None,
) -> Optional[ItemArchetype]:
    """티어 안에서 균등 추첨. 후보가 없으면 None (오류 아님)."""
    rng = rng or random
    tier = catalog.tier(tier_index)
    if tier is None:
        logger.warning("Tier %d out of range (1..%d)", tier_index, catalog.tier_count)
        return None

    candidates = []
    for key in tier.valid_candidates():
        archetype = registry.get(key)
        if archetype is None:
            logger.warning("Tier %d candidate not found: %s", tier_index, key)
            continue
        candidates.append(archetype)

    if not candidates:
        logger.warning("Tier %d has no valid candidates", tier_index)
        return None
    return rng.choice(candidates)


def validate_policy(policy: RewardPolicy, tier_count: int) -> bool:
    """count >= 0, 허용 티어 번호가 모두 [1, tier_count] 안."""
    if policy.count < 0:
        logger.warning("Invalid reward policy: negative count %d", policy.count)
        return False
    for tier_index in policy.allowed_tiers:
        if not 1 <= tier_index <= tier_count:
            logger.warning(
                "Invalid reward policy: tier %d not in 1..%d", tier_index, tier_count
            )
            return False
    return True


def _tier_sequence(
    policy: RewardPolicy, catalog: RewardTierCatalog, rng
) -> list[int]:
    """count회 추첨할 티어 번호 목록."""
    allowed = policy.allowed_tiers
    count = policy.count

    if catalog.tier_count == 0:
        logger.warning("Reward tier catalog is empty, no random rewards drawn")
        return []

    if not allowed:
        return [sample_tier(catalog, rng) for _ in range(count)]

    if policy.distribution == Distribution.EVEN and len(allowed) > 1:
        rounds = math.ceil(count / len(allowed))
        limit = min(count, len(allowed) * rounds)
        return [allowed[i % len(allowed)] for i in range(limit)]

    return [rng.choice(allowed) for _ in range(count)]


def generate_rewards(
    catalog: RewardTierCatalog,
    policy: RewardPolicy,
    registry: ArchetypeRegistry,
    rng: Optional[random.Random] = None,
) -> list[ItemArchetype]:
    """보상 목록 생성.

    1. count <= 0 → 빈 목록 (고정 보상 포함 아무것도 없음)
    2. 허용 티어 없음 → 전역 가중치로 count회
    3. even + 허용 티어 2개 이상 → 순환 배분
    4. 그 외 → 허용 티어 중 균등 선택 후 추첨
    5. 고정 보상을 뒤에 추가 (count 제한 없음)

    빈 추첨은 다시 뽑지 않으므로 count보다 적을 수 있다.
    정책이 유효하지 않으면 빈 목록.
    """
    rng = rng or random
    if policy.count <= 0:
        return []
    if not validate_policy(policy, catalog.tier_count):
        return []

    rewards: list[ItemArchetype] = []
    skipped = 0
    for tier_index in _tier_sequence(policy, catalog, rng):
        archetype = sample_item(catalog, tier_index, registry, rng)
        if archetype is None:
            skipped += 1
            continue
        rewards.append(archetype)

    for key in policy.forced_rewards:
        archetype = registry.get(key)
        if archetype is None:
            logger.warning("Forced reward not found: %s", key)
            continue
        rewards.append(archetype)

    logger.debug(
        "Generated %d rewards (requested=%d, skipped=%d, forced=%d)",
        len(rewards),
        policy.count,
        skipped,
        len(policy.forced_rewards),
    )
    return rewards
