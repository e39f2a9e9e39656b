"""재화 장부 — 정수 잔액, 0 미만 불가"""

import logging

logger = logging.getLogger(__name__)


class CurrencyLedger:
    """플레이어 재화.

    add/subtract에 음수를 넘기면 무시하고 경고한다.
    subtract는 잔액을 0 아래로 내리지 않는다.
    """

    def __init__(self, balance: int = 0) -> None:
        self._balance = max(0, int(balance))

    @property
    def balance(self) -> int:
        return self._balance

    def add(self, amount: int) -> int:
        if amount < 0:
            logger.warning("Ignored negative currency add: %d", amount)
            return self._balance
        self._balance += amount
        return self._balance

    def subtract(self, amount: int) -> int:
        if amount < 0:
            logger.warning("Ignored negative currency subtract: %d", amount)
            return self._balance
        self._balance = max(0, self._balance - amount)
        return self._balance

    def set(self, amount: int) -> int:
        self._balance = max(0, int(amount))
        return self._balance

    def can_afford(self, amount: int) -> bool:
        return self._balance >= amount

    def __repr__(self) -> str:
        return f"CurrencyLedger(balance={self._balance})"
