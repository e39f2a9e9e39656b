"""Service 통합 테스트 (인메모리 SQLite + EventBus)

PlayerService, RewardService, ForgeService, EnergyService, ShopService
"""

import random
from datetime import datetime, timezone

import pytest

from heroforge.core.event_bus import EventBus, GameEvent
from heroforge.core.event_types import EventTypes
from heroforge.core.forge.economy import CostCurve, ImproveFailure
from heroforge.core.loot.models import Distribution, RewardPolicy
from heroforge.db.models import InventorySlotModel, PlayerModel
from heroforge.services.energy_service import EnergyService
from heroforge.services.forge_service import ForgeService
from heroforge.services.player_service import PlayerService
from heroforge.services.reward_service import RewardService
from heroforge.services.shop_service import ShopService

INVENTORY_SIZE = 4


@pytest.fixture()
def services(db_session, bus, registry, loot_table):
    """모든 서비스가 같은 세션/버스를 공유"""
    return {
        "player": PlayerService(
            db_session, bus, registry, INVENTORY_SIZE, starting_currency=500
        ),
        "reward": RewardService(
            db_session, bus, registry, loot_table, INVENTORY_SIZE, rng=random.Random(42)
        ),
        "forge": ForgeService(db_session, bus, registry, CostCurve(), INVENTORY_SIZE),
        "energy": EnergyService(db_session, bus, registry),
        "shop": ShopService(db_session, bus, registry, INVENTORY_SIZE),
    }


@pytest.fixture()
def player(services) -> str:
    services["player"].register_player("p1")
    return "p1"


def _collect(bus: EventBus, event_type: str) -> list[GameEvent]:
    events: list[GameEvent] = []
    bus.subscribe(event_type, events.append)
    return events


def _buy(services, key: str = "wpn_wooden_sword") -> str:
    return services["shop"].purchase("p1", key)["instance_id"]


# ── PlayerService ───────────────────────────────────────────


class TestPlayerService:
    def test_register(self, services) -> None:
        profile = services["player"].register_player("hero")
        assert profile["currency"] == 500
        assert profile["energy"] == 100
        assert profile["is_sleeping"] is False
        assert profile["inventory_capacity"] == INVENTORY_SIZE
        assert profile["items"] == []

    def test_register_duplicate(self, services, player) -> None:
        with pytest.raises(ValueError):
            services["player"].register_player(player)

    def test_unknown_player(self, services) -> None:
        with pytest.raises(ValueError):
            services["player"].get_profile("ghost")

    def test_grant_currency(self, services, bus, player) -> None:
        events = _collect(bus, EventTypes.CURRENCY_CHANGED)
        assert services["player"].grant_currency(player, 120) == 620
        assert events[0].data["delta"] == 120

    def test_grant_negative_ignored(self, services, bus, player) -> None:
        events = _collect(bus, EventTypes.CURRENCY_CHANGED)
        assert services["player"].grant_currency(player, -50) == 500
        assert events == []

    def test_profile_lists_items_with_stats(self, services, player) -> None:
        _buy(services, "wpn_iron_sword")
        items = services["player"].get_profile(player)["items"]
        assert len(items) == 1
        assert items[0]["archetype_key"] == "wpn_iron_sword"
        assert items[0]["stats"]["attack"] == 9


# ── RewardService ───────────────────────────────────────────


class TestRewardService:
    def test_claim_adds_level_one_instances(self, services, db_session, player) -> None:
        policy = RewardPolicy(count=2, allowed_tiers=[1])
        result = services["reward"].claim_rewards(player, policy)
        assert result["success"] is True
        assert len(result["granted"]) == 2
        assert all(item["level"] == 1 for item in result["granted"])
        assert db_session.query(InventorySlotModel).count() == 2

    def test_claim_with_currency(self, services, player) -> None:
        result = services["reward"].claim_rewards(
            player, RewardPolicy(count=1, allowed_tiers=[1]), currency=75
        )
        assert result["currency"] == 575

    def test_overflow_reported(self, services, player) -> None:
        policy = RewardPolicy(
            count=3, allowed_tiers=[1], forced_rewards=["oth_slime_jelly"] * 3
        )
        result = services["reward"].claim_rewards(player, policy)
        assert len(result["granted"]) == INVENTORY_SIZE
        assert len(result["overflow"]) == 2

    def test_count_zero(self, services, player) -> None:
        policy = RewardPolicy(count=0, forced_rewards=["oth_slime_jelly"])
        result = services["reward"].claim_rewards(player, policy)
        assert result["success"] is True
        assert result["granted"] == []

    def test_invalid_policy(self, services, player) -> None:
        result = services["reward"].claim_rewards(
            player, RewardPolicy(count=1, allowed_tiers=[42])
        )
        assert result["success"] is False
        assert result["reason"] == "invalid_policy"

    def test_claim_encounter(self, services, bus, player) -> None:
        created = _collect(bus, EventTypes.ITEM_CREATED)
        claimed = _collect(bus, EventTypes.REWARDS_CLAIMED)
        result = services["reward"].claim_encounter(player, "slime")
        keys = [item["archetype_key"] for item in result["granted"]]
        assert keys[-1] == "oth_slime_jelly"
        assert len(created) == len(keys)
        assert claimed[0].data["granted"] == len(keys)

    def test_unknown_encounter(self, services, player) -> None:
        with pytest.raises(ValueError):
            services["reward"].claim_encounter(player, "unicorn")

    def test_even_policy_alternates_tiers(self, services, player) -> None:
        policy = RewardPolicy(
            count=2, allowed_tiers=[3, 5], distribution=Distribution.EVEN
        )
        rewards = services["reward"].roll_rewards(policy)
        tier3 = {"shd_oak_shield", "glv_archer_gloves", "blt_silver_belt"}
        tier5 = {"wpn_dragon_fang", "arm_phoenix_mail"}
        assert rewards[0].key in tier3
        assert rewards[1].key in tier5


# ── ForgeService ────────────────────────────────────────────


class TestForgeService:
    def test_preview(self, services, player) -> None:
        instance_id = _buy(services)
        info = services["forge"].preview(player, instance_id)
        assert info.level == 1
        assert info.cost == 100
        assert info.affordable is True
        assert info.projected_stats.attack == info.current_stats.attack + 1

    def test_improve_persists(self, services, db_session, bus, player) -> None:
        events = _collect(bus, EventTypes.ITEM_IMPROVED)
        instance_id = _buy(services)  # 500 - 40 = 460
        result = services["forge"].improve_item(player, instance_id)
        assert result.success
        assert result.new_level == 2
        assert result.new_balance == 360

        row = (
            db_session.query(InventorySlotModel)
            .filter(InventorySlotModel.instance_id == instance_id)
            .one()
        )
        assert row.encoded == "wpn_wooden_sword|2"
        assert db_session.get(PlayerModel, player).currency == 360
        assert events[0].data["new_level"] == 2

    def test_improve_insufficient_funds(self, services, db_session, bus, player) -> None:
        failures = _collect(bus, EventTypes.IMPROVEMENT_FAILED)
        instance_id = _buy(services)
        db_session.get(PlayerModel, player).currency = 50
        db_session.commit()

        result = services["forge"].improve_item(player, instance_id)
        assert result.success is False
        assert result.reason == ImproveFailure.INSUFFICIENT_FUNDS
        assert db_session.get(PlayerModel, player).currency == 50
        profile = services["player"].get_profile(player)
        assert profile["items"][0]["level"] == 1
        assert failures[0].data["reason"] == "insufficient_funds"

    def test_improve_at_max(self, services, db_session, player) -> None:
        instance_id = _buy(services)
        row = db_session.query(InventorySlotModel).one()
        row.encoded = "wpn_wooden_sword|999"
        db_session.commit()

        result = services["forge"].improve_item(player, instance_id)
        assert result.reason == ImproveFailure.ALREADY_MAX

    def test_unknown_instance(self, services, player) -> None:
        with pytest.raises(ValueError):
            services["forge"].improve_item(player, "nope")

    def test_instance_id_stable_across_reload(self, services, player) -> None:
        instance_id = _buy(services)
        services["forge"].improve_item(player, instance_id)
        services["forge"].improve_item(player, instance_id)
        items = services["player"].get_profile(player)["items"]
        assert items[0]["instance_id"] == instance_id
        assert items[0]["level"] == 3


# ── EnergyService ───────────────────────────────────────────


class TestEnergyService:
    def test_spend(self, services, bus, player) -> None:
        events = _collect(bus, EventTypes.ENERGY_SPENT)
        result = services["energy"].spend(player, 30)
        assert result["success"] is True
        assert result["energy"] == 70
        assert events[0].data["amount"] == 30

    def test_sleep_tick_and_auto_wake(self, services, db_session, bus, player) -> None:
        woke = _collect(bus, EventTypes.HERO_WOKE)
        services["energy"].spend(player, 100)
        now = datetime(2026, 3, 1, 23, 0)
        result = services["energy"].sleep(player, now)
        assert result["is_sleeping"] is True
        assert db_session.get(PlayerModel, player).last_sleep_at == now

        result = services["energy"].tick(player, 7200)
        assert result["energy"] == 50
        assert result["woke"] is False

        result = services["energy"].tick(player, 7200)
        assert result["energy"] == 100
        assert result["woke"] is True
        assert result["state"] == "awake"
        assert woke[0].data["reason"] == "recovered"

    def test_short_ticks_accumulate(self, services, player) -> None:
        services["energy"].spend(player, 100)
        services["energy"].sleep(player)
        for _ in range(3):
            result = services["energy"].tick(player, 30)  # 0.208...
        assert result["energy"] == 1  # 0.625

    def test_four_hours_of_minute_ticks(self, services, db_session, player) -> None:
        services["energy"].spend(player, 100)
        services["energy"].sleep(player)
        results = [services["energy"].tick(player, 60) for _ in range(240)]
        assert results[119]["energy"] == 50
        assert results[237]["state"] == "sleeping"
        assert results[238]["woke"] is True  # 99.58 rounds to 100
        assert results[-1]["energy"] == 100
        assert results[-1]["state"] == "awake"
        assert [r["woke"] for r in results].count(True) == 1
        assert db_session.get(PlayerModel, player).precise_energy == 100.0

    def test_spend_while_sleeping(self, services, bus, player) -> None:
        woke = _collect(bus, EventTypes.HERO_WOKE)
        services["energy"].spend(player, 50)
        services["energy"].sleep(player)
        result = services["energy"].spend(player, 30)
        assert result["success"] is True
        assert result["is_sleeping"] is False
        assert result["energy"] == 20
        assert woke[0].data["reason"] == "spend"

    def test_wake(self, services, player) -> None:
        services["energy"].sleep(player)
        assert services["energy"].wake(player)["success"] is True
        assert services["energy"].wake(player)["success"] is False

    def test_corrupt_energy_clamped_on_load(self, services, db_session, player) -> None:
        db_session.get(PlayerModel, player).current_energy = 140
        db_session.commit()
        assert services["energy"].get_energy(player)["energy"] == 100
        assert db_session.get(PlayerModel, player).current_energy == 100

    def test_legacy_heal_enabled(self, db_session, bus, registry, player) -> None:
        service = EnergyService(db_session, bus, registry, heal_legacy_energy=True)
        stored = db_session.get(PlayerModel, player)
        stored.current_energy = 49
        stored.is_sleeping = True
        stored.last_sleep_at = datetime.now(timezone.utc)
        db_session.commit()

        result = service.get_energy(player)
        assert result["energy"] == 0
        assert result["is_sleeping"] is False

    def test_unknown_player(self, services) -> None:
        with pytest.raises(ValueError):
            services["energy"].spend("ghost", 1)


# ── ShopService ─────────────────────────────────────────────


class TestShopService:
    def test_purchase(self, services, bus, player) -> None:
        events = _collect(bus, EventTypes.ITEM_PURCHASED)
        result = services["shop"].purchase(player, "wpn_iron_sword")
        assert result["success"] is True
        assert result["currency"] == 380
        assert result["slot_index"] == 0
        assert events[0].data["price"] == 120

    def test_purchase_insufficient_funds(self, services, player) -> None:
        result = services["shop"].purchase(player, "wpn_dragon_fang")
        assert result == {
            "success": False,
            "reason": "insufficient_funds",
            "currency": 500,
        }

    def test_purchase_inventory_full(self, services, player) -> None:
        for _ in range(INVENTORY_SIZE):
            _buy(services, "oth_slime_jelly")
        result = services["shop"].purchase(player, "oth_slime_jelly")
        assert result["success"] is False
        assert result["reason"] == "inventory_full"
        assert result["currency"] == 500 - 5 * INVENTORY_SIZE

    def test_purchase_unknown_archetype(self, services, player) -> None:
        with pytest.raises(ValueError):
            services["shop"].purchase(player, "ghost_item")

    def test_sell_level_one(self, services, db_session, player) -> None:
        instance_id = _buy(services, "wpn_iron_sword")  # 380
        result = services["shop"].sell(player, instance_id)
        assert result["price"] == 60
        assert result["currency"] == 440
        assert db_session.query(InventorySlotModel).count() == 0

    def test_sell_improved_item(self, services, player) -> None:
        instance_id = _buy(services, "wpn_wooden_sword")  # 460
        services["forge"].improve_item(player, instance_id)  # 360, lv 2
        result = services["shop"].sell(player, instance_id)
        assert result["price"] == 21  # 20 * 1.05
        assert result["currency"] == 381

    def test_sell_then_buy_reuses_slot(self, services, player) -> None:
        first = _buy(services)
        _buy(services)
        services["shop"].sell(player, first)
        result = services["shop"].purchase(player, "hlm_leather_cap")
        assert result["slot_index"] == 0

    def test_unresolved_row_survives_purchase(self, services, db_session, player) -> None:
        db_session.add(
            InventorySlotModel(
                player_id=player,
                slot_index=0,
                instance_id="legacy",
                encoded="retired_item|7",
            )
        )
        db_session.commit()

        result = services["shop"].purchase(player, "wpn_wooden_sword")
        assert result["success"] is True
        assert result["slot_index"] == 1

        rows = {
            row.instance_id: (row.slot_index, row.encoded)
            for row in db_session.query(InventorySlotModel).all()
        }
        assert rows["legacy"] == (0, "retired_item|7")
        assert rows[result["instance_id"]] == (1, "wpn_wooden_sword|1")

    def test_unresolved_row_counts_as_occupied(self, services, db_session, player) -> None:
        db_session.add(
            InventorySlotModel(
                player_id=player,
                slot_index=2,
                instance_id="legacy",
                encoded="retired_item|7",
            )
        )
        db_session.commit()
        slots = [
            services["shop"].purchase(player, "oth_slime_jelly")["slot_index"]
            for _ in range(INVENTORY_SIZE - 1)
        ]
        assert slots == [0, 1, 3]
        result = services["shop"].purchase(player, "oth_slime_jelly")
        assert result["reason"] == "inventory_full"
        legacy = (
            db_session.query(InventorySlotModel)
            .filter(InventorySlotModel.instance_id == "legacy")
            .one()
        )
        assert legacy.slot_index == 2

    def test_sell_keeps_unresolved_row(self, services, db_session, player) -> None:
        db_session.add(
            InventorySlotModel(
                player_id=player,
                slot_index=3,
                instance_id="legacy",
                encoded="retired_item|7",
            )
        )
        db_session.commit()
        instance_id = _buy(services)
        services["shop"].sell(player, instance_id)
        remaining = [row.instance_id for row in db_session.query(InventorySlotModel)]
        assert remaining == ["legacy"]

    def test_sell_unknown_instance(self, services, player) -> None:
        with pytest.raises(ValueError):
            services["shop"].sell(player, "nope")

    def test_list_stock(self, services) -> None:
        stock = services["shop"].list_stock()
        assert len(stock) == 14
        assert {"archetype_key", "price", "rarity"} <= set(stock[0])
