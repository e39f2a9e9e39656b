"""보상 티어 카탈로그 — JSON 로드 + 검증"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from heroforge.core.item.registry import ArchetypeRegistry

from .models import (
    EXPECTED_WEIGHT_TOTAL,
    Distribution,
    RewardPolicy,
    RewardTier,
    RewardTierCatalog,
)

logger = logging.getLogger(__name__)


@dataclass
class LootTable:
    """티어 카탈로그 + 조우별 보상 정책"""

    catalog: RewardTierCatalog
    encounters: dict[str, RewardPolicy] = field(default_factory=dict)

    def policy_for(self, encounter: str) -> RewardPolicy | None:
        return self.encounters.get(encounter)


def validate_catalog(
    catalog: RewardTierCatalog, registry: ArchetypeRegistry | None = None
) -> bool:
    """권고용 검증. 문제마다 경고 로그, 예외는 던지지 않는다.

    - 가중치 음수 금지
    - 티어마다 유효 후보 1개 이상 (registry가 있으면 존재 여부까지)
    - 가중치 합 100
    """
    valid = True
    if catalog.tier_count == 0:
        logger.warning("Reward tier catalog has no tiers")
        return False

    for index, tier in enumerate(catalog.tiers, start=1):
        if tier.weight < 0:
            logger.warning("Tier %d has negative weight %d", index, tier.weight)
            valid = False
        candidates = tier.valid_candidates()
        if registry is not None:
            missing = [key for key in candidates if key not in registry]
            for key in missing:
                logger.warning("Tier %d references unknown archetype: %s", index, key)
            candidates = [key for key in candidates if key in registry]
        if not candidates:
            logger.warning("Tier %d has no candidates", index)
            valid = False

    total = sum(tier.weight for tier in catalog.tiers)
    if total != EXPECTED_WEIGHT_TOTAL:
        logger.warning(
            "Tier weights sum to %d (expected %d)", total, EXPECTED_WEIGHT_TOTAL
        )
        valid = False
    return valid


def parse_policy(raw: dict) -> RewardPolicy:
    return RewardPolicy(
        count=int(raw.get("count", 1)),
        allowed_tiers=[int(t) for t in raw.get("allowed_tiers", [])],
        distribution=Distribution(raw.get("distribution", Distribution.RANDOM.value)),
        forced_rewards=list(raw.get("forced_rewards", [])),
    )


def load_catalog_from_json(path: str | Path) -> LootTable:
    """reward_tiers.json 로드.

    형식:
        {"tiers": [{"weight": 40, "candidates": ["key", null]}, ...],
         "encounters": {"slime": {"count": 2, "allowed_tiers": [1, 2]}}}
    잘못된 조우 정책은 경고 후 건너뛴다.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    tiers = tuple(
        RewardTier(
            weight=int(t.get("weight", 0)),
            candidates=tuple(t.get("candidates", [])),
        )
        for t in raw.get("tiers", [])
    )
    catalog = RewardTierCatalog(tiers=tiers)

    encounters: dict[str, RewardPolicy] = {}
    for name, raw_policy in raw.get("encounters", {}).items():
        try:
            encounters[name] = parse_policy(raw_policy)
        except (TypeError, ValueError) as e:
            logger.warning("Failed to load encounter policy: %s (%s)", name, e)

    logger.info(
        "Loaded %d reward tiers and %d encounter policies from %s",
        catalog.tier_count,
        len(encounters),
        path,
    )
    return LootTable(catalog=catalog, encounters=encounters)
