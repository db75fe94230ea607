"""Survey budget bookkeeping."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Mapping

from .config import EconomyConfig
from .tools import TOOL_CATALOG, Tool

logger = logging.getLogger(__name__)


class RewardKind(str, Enum):
    STRUCTURE = "structure"


class Economy:
    """Tracks funds and the number of paid actions.

    Spending never fails: funds are allowed to go negative and there is no
    bankruptcy condition.
    """

    def __init__(
        self,
        config: EconomyConfig | None = None,
        *,
        on_funds_changed: Callable[[int], None] | None = None,
    ) -> None:
        config = config or EconomyConfig()
        self.initial_funds = config.initial_funds
        self.funds = config.initial_funds
        self.actions_used = 0
        self.costs: dict[Tool, int] = {tool: entry.cost for tool, entry in TOOL_CATALOG.items()}
        for tool, cost in config.cost_overrides:
            self.costs[Tool.parse(tool)] = cost
        self.rewards: Mapping[RewardKind, int] = {
            RewardKind.STRUCTURE: config.discovery_reward,
        }
        self.on_funds_changed = on_funds_changed

    def cost_of(self, tool: Tool) -> int:
        return self.costs[tool]

    def spend(self, tool: Tool) -> bool:
        """Charge the price of *tool* and count the action."""

        cost = self.costs[tool]
        self.funds -= cost
        self.actions_used += 1
        logger.debug("Spent %d on %s; funds now %d", cost, tool.value, self.funds)
        self._notify()
        return True

    def reward(self, kind: RewardKind = RewardKind.STRUCTURE) -> int:
        """Pay out the reward for *kind* and return the amount paid."""

        amount = self.rewards.get(kind, 0)
        if not amount:
            return 0
        self.funds += amount
        logger.debug("Rewarded %d for %s; funds now %d", amount, kind.value, self.funds)
        self._notify()
        return amount

    def _notify(self) -> None:
        if self.on_funds_changed is not None:
            self.on_funds_changed(self.funds)
