"""에너지 회복 상태 머신 — AWAKE / SLEEPING

에너지 값은 _set_energy() 한 곳에서만 바뀌고 항상 [0, 100]으로 보정된다.
시계는 읽지 않는다. 경과 시간은 호출자가 tick()에 넘긴다.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from .models import (
    MAX_ENERGY,
    MIN_ENERGY,
    RECOVERY_PER_SECOND,
    EnergyProfile,
    EnergyState,
)

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


class EnergyStateMachine:
    """영웅 에너지.

    수면 중 회복은 소수 누적값(_precise)으로 계산하고,
    정수 에너지는 그 값을 반올림한 것이다.
    누적값도 프로필에 함께 저장되어 짧은 tick이 호출 사이에 사라지지 않는다.
    """

    def __init__(
        self,
        energy: int = MAX_ENERGY,
        state: EnergyState = EnergyState.AWAKE,
        sleep_started_at: Optional[datetime] = None,
    ) -> None:
        self._energy = MAX_ENERGY
        self._precise = float(MAX_ENERGY)
        self._state = state
        self._sleep_started_at = sleep_started_at
        self._set_energy(energy)

    # === 상태 조회 ===

    @property
    def energy(self) -> int:
        return self._energy

    @property
    def state(self) -> EnergyState:
        return self._state

    @property
    def is_sleeping(self) -> bool:
        return self._state == EnergyState.SLEEPING

    @property
    def sleep_started_at(self) -> Optional[datetime]:
        return self._sleep_started_at

    def can_afford(self, cost: int) -> bool:
        return 0 <= cost <= self._energy

    # === 단일 변경 경로 ===

    def _set_energy(self, value: float) -> None:
        """에너지 변경은 전부 여기를 거친다. [0, 100] 보정."""
        precise = max(float(MIN_ENERGY), min(float(MAX_ENERGY), float(value)))
        self._precise = precise
        self._energy = min(MAX_ENERGY, _round_half_up(precise))

    # === 전이 ===

    def spend(self, amount: int) -> bool:
        """에너지 사용. 수면 중이면 먼저 깨운다 (사용 실패해도 깨어난 상태 유지).

        amount가 음수이거나 현재 에너지보다 크면 False.
        """
        if self.is_sleeping:
            self.wake_up()

        if amount < 0:
            logger.warning("Ignored negative energy spend: %d", amount)
            return False
        if amount > self._energy:
            return False

        self._set_energy(self._energy - amount)
        return True

    def start_sleep(self, now: datetime) -> bool:
        """AWAKE → SLEEPING. 이미 자는 중이면 False."""
        if self.is_sleeping:
            return False
        self._state = EnergyState.SLEEPING
        self._sleep_started_at = now
        logger.debug("Hero fell asleep at %s (energy=%d)", now, self._energy)
        return True

    def wake_up(self) -> bool:
        """SLEEPING → AWAKE. 에너지는 그대로. 이미 깨어 있으면 False."""
        if not self.is_sleeping:
            return False
        self._state = EnergyState.AWAKE
        logger.debug("Hero woke up (energy=%d)", self._energy)
        return True

    def tick(self, elapsed_seconds: float) -> bool:
        """수면 중 회복. 반환: 이번 tick에서 자동 기상했는지.

        4시간(14400초)이면 0 → 100.
        100에 도달하면 같은 tick 안에서 AWAKE로 전이.
        AWAKE 상태나 음수 경과 시간은 무시.
        """
        if not self.is_sleeping:
            return False
        if elapsed_seconds < 0:
            logger.warning("Ignored negative tick: %s", elapsed_seconds)
            return False
        if elapsed_seconds == 0:
            return False

        self._set_energy(self._precise + elapsed_seconds * RECOVERY_PER_SECOND)
        if self._energy >= MAX_ENERGY:
            self._set_energy(MAX_ENERGY)
            self._state = EnergyState.AWAKE
            logger.info("Energy fully recovered, hero woke up")
            return True
        return False

    # === 저장 레코드 변환 ===

    def to_profile(self) -> EnergyProfile:
        return EnergyProfile(
            current_energy=self._energy,
            is_sleeping=self.is_sleeping,
            sleep_started_at=self._sleep_started_at,
            precise_energy=self._precise,
        )

    @classmethod
    def from_profile(
        cls,
        profile: EnergyProfile,
        corrupt_values: Iterable[int] = (),
    ) -> EnergyStateMachine:
        """저장 레코드에서 복원. heal()을 먼저 적용한다.

        누적값은 반올림 결과가 정수 에너지와 일치할 때만 이어받는다.
        """
        healed = heal(profile, corrupt_values)
        state = EnergyState.SLEEPING if healed.is_sleeping else EnergyState.AWAKE
        machine = cls(
            energy=healed.current_energy,
            state=state,
            sleep_started_at=healed.sleep_started_at,
        )
        precise = healed.precise_energy
        if precise is not None and (
            MIN_ENERGY <= precise <= MAX_ENERGY
            and _round_half_up(precise) == healed.current_energy
        ):
            machine._set_energy(precise)
        return machine


def heal(profile: EnergyProfile, corrupt_values: Iterable[int] = ()) -> EnergyProfile:
    """저장된 에너지 값 정상화. 원본 profile은 바꾸지 않는다.

    - corrupt_values에 있는 값 → 0, 강제 AWAKE
    - 범위 밖 값 → [0, 100] 보정
    """
    energy = profile.current_energy
    if energy in set(corrupt_values):
        logger.error(
            "Corrupt legacy energy value %d detected, reset to 0 and awake", energy
        )
        return EnergyProfile(
            current_energy=MIN_ENERGY,
            is_sleeping=False,
            sleep_started_at=profile.sleep_started_at,
        )

    if not MIN_ENERGY <= energy <= MAX_ENERGY:
        clamped = max(MIN_ENERGY, min(MAX_ENERGY, energy))
        logger.error("Energy %d out of range, clamped to %d", energy, clamped)
        return EnergyProfile(
            current_energy=clamped,
            is_sleeping=profile.is_sleeping,
            sleep_started_at=profile.sleep_started_at,
        )

    return EnergyProfile(
        current_energy=energy,
        is_sleeping=profile.is_sleeping,
        sleep_started_at=profile.sleep_started_at,
        precise_energy=profile.precise_energy,
    )
