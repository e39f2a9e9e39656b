"""heroforge Core — 순수 Python 도메인 로직"""

from heroforge.core.energy import EnergyProfile, EnergyState, EnergyStateMachine
from heroforge.core.forge import CostCurve, CurrencyLedger, ImproveFailure, improve
from heroforge.core.item import (
    ArchetypeRegistry,
    Inventory,
    ItemArchetype,
    ItemInstance,
    StatBundle,
)
from heroforge.core.loot import RewardPolicy, RewardTierCatalog, generate_rewards

__all__ = [
    "ArchetypeRegistry",
    "ItemArchetype",
    "ItemInstance",
    "StatBundle",
    "Inventory",
    "RewardTierCatalog",
    "RewardPolicy",
    "generate_rewards",
    "CurrencyLedger",
    "CostCurve",
    "ImproveFailure",
    "improve",
    "EnergyProfile",
    "EnergyState",
    "EnergyStateMachine",
]
