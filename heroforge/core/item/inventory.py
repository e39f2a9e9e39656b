"""인벤토리 — 고정 크기 슬롯 배열"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from .codec import EMPTY_SLOT, deserialize, is_empty_slot, serialize
from .models import ItemInstance
from .registry import ArchetypeRegistry

logger = logging.getLogger(__name__)

INVENTORY_ROWS = 8
INVENTORY_COLUMNS = 17
DEFAULT_CAPACITY = INVENTORY_ROWS * INVENTORY_COLUMNS  # 136


class Inventory:
    """슬롯 기반 인벤토리. 빈 슬롯은 None.

    예약 슬롯은 복원하지 못한 저장 항목이 차지한 자리다.
    비어 보이지만 add()/place()가 쓰지 않는다.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"Inventory capacity must be positive: {capacity}")
        self._slots: list[Optional[ItemInstance]] = [None] * capacity
        self._reserved: set[int] = set()

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def add(self, instance: ItemInstance) -> int:
        """첫 번째 빈 슬롯에 넣는다. 반환: 슬롯 번호, 가득 차면 -1."""
        for index, slot in enumerate(self._slots):
            if slot is None and index not in self._reserved:
                self._slots[index] = instance
                return index
        logger.debug("Inventory full, %s not added", instance.instance_id)
        return -1

    def place(self, index: int, instance: ItemInstance) -> bool:
        """지정 슬롯에 넣는다. 범위 밖이거나 이미 차 있거나 예약이면 False."""
        if not self._is_free(index):
            return False
        self._slots[index] = instance
        return True

    def reserve(self, index: int) -> bool:
        """빈 슬롯을 예약한다. 범위 밖이거나 이미 차 있으면 False."""
        if not self._is_free(index):
            return False
        self._reserved.add(index)
        return True

    def is_reserved(self, index: int) -> bool:
        return index in self._reserved

    def _is_free(self, index: int) -> bool:
        return (
            0 <= index < self.capacity
            and self._slots[index] is None
            and index not in self._reserved
        )

    def remove(self, index: int) -> Optional[ItemInstance]:
        """슬롯 비우기. 반환: 꺼낸 인스턴스 (없으면 None)."""
        if not 0 <= index < self.capacity:
            return None
        instance = self._slots[index]
        self._slots[index] = None
        return instance

    def get(self, index: int) -> Optional[ItemInstance]:
        if not 0 <= index < self.capacity:
            return None
        return self._slots[index]

    def find(self, instance_id: str) -> int:
        """instance_id로 슬롯 검색. 없으면 -1."""
        for index, slot in enumerate(self._slots):
            if slot is not None and slot.instance_id == instance_id:
                return index
        return -1

    def has_space(self) -> bool:
        return self.free_slots() > 0

    def free_slots(self) -> int:
        return sum(1 for index in range(self.capacity) if self._is_free(index))

    def items(self) -> Iterator[tuple[int, ItemInstance]]:
        """(슬롯 번호, 인스턴스) — 빈 슬롯 제외."""
        for index, slot in enumerate(self._slots):
            if slot is not None:
                yield index, slot

    def to_records(self) -> list[str]:
        """저장용 문자열 배열. 빈 슬롯은 EMPTY_SLOT."""
        return [EMPTY_SLOT if slot is None else serialize(slot) for slot in self._slots]

    @classmethod
    def from_records(
        cls,
        records: list[str],
        registry: ArchetypeRegistry,
        capacity: int = DEFAULT_CAPACITY,
    ) -> Inventory:
        """저장 배열에서 복원. 잘못된 항목은 빈 슬롯으로 두고 경고."""
        inventory = cls(capacity)
        for index, record in enumerate(records[:capacity]):
            if is_empty_slot(record):
                continue
            result = deserialize(record, registry)
            if not result.ok:
                logger.warning(
                    "Inventory slot %d dropped: %r (%s)", index, record, result.reason
                )
                continue
            inventory._slots[index] = result.instance
        if len(records) > capacity:
            logger.warning(
                "Inventory records truncated: %d > capacity %d", len(records), capacity
            )
        return inventory
