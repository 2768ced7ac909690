"""
Two-Tier (Keep/Discard) Policy Instances

Classic rent-or-buy: keeping the resource costs ``keep_cost`` per idle tick,
and an access to a discarded resource costs ``recover_cost`` once.

- OfflineInstance: knows every future access, discards exactly when the
  next access is at least ``break_even`` ticks away (optimal).
- NaiveInstance: discards after ``break_even`` idle ticks (2-competitive).
- KarlinInstance: discards after a wait drawn from the Karlin distribution
  after every access (e/(e-1)-competitive in expectation).

On an access tick the access is served first: a discarded resource pays
its recovery and is kept again, and no holding cost is charged for that
tick. On an idle tick the transition rule runs before the holding charge.
"""

import math
from typing import Iterable, Optional

import numpy as np

from . import karlin
from .config import TwoTierCosts
from .instance import Policy, PolicyInstance
from .trace import AccessTrace


class OfflineInstance(PolicyInstance):
    """Omniscient Keep/Discard policy."""

    def __init__(self, costs: TwoTierCosts, access_list: Iterable[int]):
        super().__init__("Offline", costs)
        self.access_list = AccessTrace.coerce(access_list)
        self.cursor = self.access_list.cursor()

    def time_to_next_access(self) -> float:
        """Ticks until the next access, or infinity when none remains."""
        next_access = self.cursor.peek()
        while next_access is not None and next_access <= self.t:
            self.cursor.advance()
            next_access = self.cursor.peek()
        if next_access is None:
            return math.inf
        return next_access - self.t

    def tick(self, access: bool):
        self.t += 1
        if access:
            if self.cursor.peek() == self.t:
                self.cursor.advance()
            self._recover()
            return

        # Keeping until the next access costs at least one recovery: discard now.
        if self.policy is Policy.KEEP and self.time_to_next_access() >= self.costs.break_even:
            self._transition(Policy.DISCARD)
        self._charge_holding()


class NaiveInstance(PolicyInstance):
    """Deterministic online policy: discard after ``break_even`` idle ticks."""

    def __init__(self, costs: TwoTierCosts, name: str = "Naive"):
        super().__init__(name, costs)
        self.last_access = 0
        self.wait_before_discard = self._next_wait()

    def _next_wait(self) -> float:
        return self.costs.break_even

    def tick(self, access: bool):
        self.t += 1
        if access:
            self.last_access = self.t
            self._recover()
            self.wait_before_discard = self._next_wait()
            return

        elapsed = self.t - self.last_access
        if self.policy is Policy.KEEP and elapsed >= self.wait_before_discard:
            self._transition(Policy.DISCARD)
        self._charge_holding()


class KarlinInstance(NaiveInstance):
    """Randomized online policy with a Karlin-distributed discard wait."""

    def __init__(self, costs: TwoTierCosts, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.sampled_waits = []
        super().__init__(costs, name="Karlin")

    def _next_wait(self) -> float:
        wait = karlin.sample(self.costs.break_even, self.rng)
        self.sampled_waits.append(wait)
        return wait
