"""보상 티어 엔진 Core 패키지"""

from heroforge.core.loot.catalog import (
    LootTable,
    load_catalog_from_json,
    parse_policy,
    validate_catalog,
)
from heroforge.core.loot.engine import (
    generate_rewards,
    sample_item,
    sample_tier,
    validate_policy,
)
from heroforge.core.loot.models import (
    DEFAULT_TIER_WEIGHTS,
    Distribution,
    RewardPolicy,
    RewardTier,
    RewardTierCatalog,
)

__all__ = [
    # models
    "DEFAULT_TIER_WEIGHTS",
    "Distribution",
    "RewardTier",
    "RewardTierCatalog",
    "RewardPolicy",
    # engine
    "sample_tier",
    "sample_item",
    "generate_rewards",
    "validate_policy",
    # catalog
    "LootTable",
    "validate_catalog",
    "parse_policy",
    "load_catalog_from_json",
]
