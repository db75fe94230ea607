"""Tests for the survey budget."""

from uncharted.config import EconomyConfig
from uncharted.economy import Economy, RewardKind
from uncharted.tools import TOOL_CATALOG, Tool


def test_default_prices_come_from_catalog():
    economy = Economy()
    assert economy.funds == 5000
    assert {tool: economy.cost_of(tool) for tool in Tool} == {
        Tool.SCAN: 50,
        Tool.LIDAR: 100,
        Tool.DRILL: 250,
        Tool.EXCAVATE: 500,
        Tool.TERRAQUEST: 60,
    }
    assert len({entry.cost for entry in TOOL_CATALOG.values()}) == len(TOOL_CATALOG)


def test_spend_and_reward_arithmetic_allows_negative_funds():
    changes = []
    economy = Economy(EconomyConfig(initial_funds=600), on_funds_changed=changes.append)
    spends = [Tool.EXCAVATE, Tool.DRILL, Tool.SCAN, Tool.EXCAVATE]

    for tool in spends:
        assert economy.spend(tool) is True
    paid = economy.reward(RewardKind.STRUCTURE)

    expected = 600 - sum(economy.cost_of(tool) for tool in spends) + 2000
    assert paid == 2000
    assert economy.funds == expected
    assert economy.actions_used == len(spends)
    assert min(changes) < 0
    assert changes[-1] == expected
    assert len(changes) == len(spends) + 1


def test_reward_does_not_count_as_action():
    economy = Economy()
    economy.reward()
    assert economy.actions_used == 0
    assert economy.funds == 7000


def test_cost_overrides_replace_catalog_prices():
    economy = Economy(EconomyConfig(cost_overrides=((Tool.DRILL, 50), ("scan", 10))))
    assert economy.cost_of(Tool.DRILL) == 50
    assert economy.cost_of(Tool.SCAN) == 10
    assert economy.cost_of(Tool.LIDAR) == 100
