"""강화 경제 테스트: 비용 곡선, 원자적 강화, 미리보기, 재화 장부"""

from __future__ import annotations

from heroforge.core.forge.economy import (
    CostCurve,
    ImproveFailure,
    improve,
    improvement_info,
    projected_stats,
)
from heroforge.core.forge.ledger import CurrencyLedger
from heroforge.core.item.models import (
    MAX_LEVEL,
    ItemArchetype,
    ItemInstance,
    ItemType,
    Rarity,
    StatBundle,
)
from heroforge.core.item.progression import stats_at_level


def _make_archetype() -> ItemArchetype:
    return ItemArchetype(
        key="wpn_test_sword",
        display_name="Test Sword",
        item_type=ItemType.WEAPON,
        rarity=Rarity.RARE,
        base_stats=StatBundle(attack=10, hp=5),
        price=200,
    )


# ── CostCurve ───────────────────────────────────────────────


class TestCostCurve:
    def test_reference_values(self) -> None:
        curve = CostCurve()
        assert curve.cost(1) == 100
        assert curve.cost(2) == 230

    def test_below_one_treated_as_one(self) -> None:
        curve = CostCurve()
        assert curve.cost(0) == 100
        assert curve.cost(-7) == 100

    def test_strictly_increasing(self) -> None:
        curve = CostCurve()
        costs = [curve.cost(level) for level in range(1, curve.max_level)]
        assert all(b > a for a, b in zip(costs, costs[1:]))

    def test_custom_parameters(self) -> None:
        curve = CostCurve(base_cost=10, cost_multiplier=1.0, max_level=5)
        assert curve.cost(3) == 30
        assert curve.can_improve(4)
        assert not curve.can_improve(5)


# ── improve ─────────────────────────────────────────────────


class TestImprove:
    def test_success(self) -> None:
        instance = ItemInstance(archetype_key="wpn_test_sword")
        ledger = CurrencyLedger(250)
        result = improve(instance, ledger)
        assert result.success is True
        assert result.reason is None
        assert result.cost == 100
        assert result.new_balance == 150
        assert result.new_level == 2
        assert ledger.balance == 150
        assert instance.level == 2

    def test_insufficient_funds_mutates_nothing(self) -> None:
        instance = ItemInstance(archetype_key="wpn_test_sword")
        ledger = CurrencyLedger(50)
        result = improve(instance, ledger)
        assert result.success is False
        assert result.reason == ImproveFailure.INSUFFICIENT_FUNDS
        assert result.cost == 100
        assert ledger.balance == 50
        assert instance.level == 1
        assert instance.version == 0

    def test_exact_balance(self) -> None:
        instance = ItemInstance(archetype_key="wpn_test_sword", level=2)
        ledger = CurrencyLedger(230)
        assert improve(instance, ledger).success
        assert ledger.balance == 0
        assert instance.level == 3

    def test_already_max(self) -> None:
        instance = ItemInstance(archetype_key="wpn_test_sword", level=MAX_LEVEL)
        ledger = CurrencyLedger(10**12)
        result = improve(instance, ledger)
        assert result.success is False
        assert result.reason == ImproveFailure.ALREADY_MAX
        assert result.cost is None
        assert ledger.balance == 10**12
        assert instance.level == MAX_LEVEL

    def test_custom_max_level(self) -> None:
        curve = CostCurve(max_level=3)
        instance = ItemInstance(archetype_key="wpn_test_sword", level=3)
        ledger = CurrencyLedger(10_000)
        assert improve(instance, ledger, curve).reason == ImproveFailure.ALREADY_MAX

    def test_repeated_improves(self) -> None:
        curve = CostCurve()
        instance = ItemInstance(archetype_key="wpn_test_sword")
        ledger = CurrencyLedger(curve.cost(1) + curve.cost(2) + curve.cost(3))
        for _ in range(3):
            assert improve(instance, ledger, curve).success
        assert instance.level == 4
        assert ledger.balance == 0
        assert improve(instance, ledger, curve).reason == ImproveFailure.INSUFFICIENT_FUNDS


# ── Preview ─────────────────────────────────────────────────


class TestPreview:
    def test_projected_stats_next_level(self) -> None:
        archetype = _make_archetype()
        instance = ItemInstance(archetype_key=archetype.key, level=4)
        assert projected_stats(instance, archetype) == stats_at_level(archetype, 5)
        assert instance.level == 4

    def test_projected_stats_at_max(self) -> None:
        archetype = _make_archetype()
        instance = ItemInstance(archetype_key=archetype.key, level=MAX_LEVEL)
        assert projected_stats(instance, archetype) == stats_at_level(archetype, MAX_LEVEL)

    def test_improvement_info(self) -> None:
        archetype = _make_archetype()
        instance = ItemInstance(archetype_key=archetype.key)
        info = improvement_info(instance, archetype, CurrencyLedger(99))
        assert info.level == 1
        assert info.max_level == MAX_LEVEL
        assert info.can_improve is True
        assert info.cost == 100
        assert info.affordable is False
        assert info.current_stats == archetype.base_stats
        assert info.projected_stats.attack == 11

    def test_improvement_info_at_max(self) -> None:
        archetype = _make_archetype()
        instance = ItemInstance(archetype_key=archetype.key, level=MAX_LEVEL)
        info = improvement_info(instance, archetype, CurrencyLedger(10**9))
        assert info.can_improve is False
        assert info.cost is None
        assert info.affordable is False


# ── CurrencyLedger ──────────────────────────────────────────


class TestCurrencyLedger:
    def test_add_and_subtract(self) -> None:
        ledger = CurrencyLedger(10)
        assert ledger.add(5) == 15
        assert ledger.subtract(3) == 12

    def test_negative_amounts_ignored(self) -> None:
        ledger = CurrencyLedger(10)
        assert ledger.add(-5) == 10
        assert ledger.subtract(-5) == 10

    def test_subtract_clamps_at_zero(self) -> None:
        ledger = CurrencyLedger(10)
        assert ledger.subtract(25) == 0

    def test_set_and_initial_clamp(self) -> None:
        assert CurrencyLedger(-4).balance == 0
        ledger = CurrencyLedger()
        assert ledger.set(40) == 40
        assert ledger.set(-1) == 0

    def test_can_afford(self) -> None:
        ledger = CurrencyLedger(100)
        assert ledger.can_afford(100)
        assert not ledger.can_afford(101)
