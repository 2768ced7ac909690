"""
Policy Instance Base

A policy instance is the per-resource state machine driven one tick at a
time by the simulator. Each variant decides when to move a resource out of
the kept state and accrues holding and recovery costs as it goes.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Any


class Policy(Enum):
    """Retention state of the simulated resource."""
    KEEP = "keep"
    COMPRESS = "compress"
    DISCARD = "discard"


class PolicyInstance(ABC):
    """Abstract base class for retention policy instances."""

    def __init__(self, name: str, costs):
        self.name = name
        self.costs = costs
        self.logger = logging.getLogger(__name__)

        self.t = 0
        self.policy = Policy.KEEP
        self.accrued_cost = 0.0
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            'transitions': 0,
            'recoveries': 0,
            'holding_cost': 0.0,
            'recovery_cost': 0.0,
        }

    @abstractmethod
    def tick(self, access: bool):
        """Advance one tick; ``access`` tells whether the resource is needed now."""
        pass

    def total_accrued_cost(self) -> float:
        return self.accrued_cost

    def _transition(self, policy: Policy):
        if policy is self.policy:
            return
        self.logger.debug(f"{self.name} t={self.t}: {self.policy.value} -> {policy.value}")
        self.policy = policy
        self.stats['transitions'] += 1

    def _charge_holding(self):
        cost = self.costs.holding_cost(self.policy)
        self.accrued_cost += cost
        self.stats['holding_cost'] += cost

    def _recover(self):
        """Serve an access: pay to bring the resource back if it is not kept."""
        if self.policy is Policy.KEEP:
            return
        cost = self.costs.recovery_cost(self.policy)
        self.accrued_cost += cost
        self.stats['recovery_cost'] += cost
        self.stats['recoveries'] += 1
        self._transition(Policy.KEEP)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(t={self.t}, policy={self.policy.value}, "
                f"accrued_cost={self.accrued_cost})")
