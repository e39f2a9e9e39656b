"""강화 경제 Core 패키지"""

from heroforge.core.forge.economy import (
    CostCurve,
    ImproveFailure,
    ImprovementInfo,
    ImproveResult,
    improve,
    improvement_info,
    projected_stats,
)
from heroforge.core.forge.ledger import CurrencyLedger

__all__ = [
    "CurrencyLedger",
    "CostCurve",
    "ImproveFailure",
    "ImproveResult",
    "ImprovementInfo",
    "improve",
    "projected_stats",
    "improvement_info",
]
