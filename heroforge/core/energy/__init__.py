"""에너지 회복 Core 패키지"""

from heroforge.core.energy.machine import EnergyStateMachine, heal
from heroforge.core.energy.models import (
    FULL_RECOVERY_SECONDS,
    LEGACY_CORRUPT_ENERGY,
    MAX_ENERGY,
    EnergyProfile,
    EnergyState,
)

__all__ = [
    "MAX_ENERGY",
    "FULL_RECOVERY_SECONDS",
    "LEGACY_CORRUPT_ENERGY",
    "EnergyState",
    "EnergyProfile",
    "EnergyStateMachine",
    "heal",
]
