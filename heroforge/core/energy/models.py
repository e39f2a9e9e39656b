"""에너지 도메인 모델"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

MAX_ENERGY = 100
MIN_ENERGY = 0
FULL_RECOVERY_SECONDS = 4 * 3600
RECOVERY_PER_SECOND = MAX_ENERGY / FULL_RECOVERY_SECONDS

# 과거 저장 데이터에서 관측된 손상 값
LEGACY_CORRUPT_ENERGY: frozenset[int] = frozenset({48, 49})


class EnergyState(str, Enum):
    AWAKE = "awake"
    SLEEPING = "sleeping"


@dataclass
class EnergyProfile:
    """플레이어 저장 레코드의 에너지 부분.

    sleep_started_at은 기록만 하고 tick 계산에는 쓰지 않는다.
    precise_energy는 수면 회복 소수 누적값 (없으면 current_energy 사용).
    """

    current_energy: int = MAX_ENERGY
    is_sleeping: bool = False
    sleep_started_at: Optional[datetime] = None
    precise_energy: Optional[float] = None
