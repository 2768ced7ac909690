"""
Three-Tier (Keep/Compress/Discard) Policy Instances

Compressing sits between keeping and discarding: it holds the resource at a
reduced per-tick cost and makes the next access cheaper to serve than a full
recovery from discard. Tick ordering matches the two-tier instances.
"""

import math
from typing import Iterable, Optional

import numpy as np

from . import karlin
from .config import ThreeTierCosts
from .instance import Policy, PolicyInstance
from .trace import AccessTrace


class ThreeTierOfflineInstance(PolicyInstance):
    """
    Omniscient Keep/Compress/Discard policy.

    While kept, the gap to the next access picks the cheapest tier:

        gap <= keep_threshold                        -> keep
        keep_threshold < gap <= compress_threshold   -> compress
        gap > compress_threshold                     -> discard

    When keep_threshold exceeds compress_threshold, compressing is never the
    cheapest option and the choice reduces to keep vs discard at the
    discard break-even.
    """

    def __init__(self, costs: ThreeTierCosts, access_list: Iterable[int]):
        super().__init__("Offline", costs)
        self.access_list = AccessTrace.coerce(access_list)
        self.cursor = self.access_list.cursor()

    def time_to_next_access(self) -> float:
        next_access = self.cursor.peek()
        while next_access is not None and next_access <= self.t:
            self.cursor.advance()
            next_access = self.cursor.peek()
        if next_access is None:
            return math.inf
        return next_access - self.t

    def select_policy(self, gap: float) -> Policy:
        keep_threshold = self.costs.keep_threshold
        compress_threshold = self.costs.compress_threshold

        if keep_threshold > compress_threshold:
            if gap <= self.costs.discard_break_even:
                return Policy.KEEP
            return Policy.DISCARD

        if gap <= keep_threshold:
            return Policy.KEEP
        if gap <= compress_threshold:
            return Policy.COMPRESS
        return Policy.DISCARD

    def tick(self, access: bool):
        self.t += 1
        if access:
            if self.cursor.peek() == self.t:
                self.cursor.advance()
            self._recover()
            return

        if self.policy is Policy.KEEP:
            self._transition(self.select_policy(self.time_to_next_access()))
        self._charge_holding()


class ThreeTierNaiveInstance(PolicyInstance):
    """
    Deterministic compress-aware online policy.

    Compresses after ``recover_from_compress_cost / keep_cost`` idle ticks and
    discards after ``recover_from_discard_cost / keep_cost`` idle ticks.
    """

    def __init__(self, costs: ThreeTierCosts, name: str = "Naive"):
        super().__init__(name, costs)
        self.last_access = 0
        self.wait_before_compress, self.wait_before_discard = self._next_waits()

    def _next_waits(self):
        return self.costs.compress_break_even, self.costs.discard_break_even

    def tick(self, access: bool):
        self.t += 1
        if access:
            self.last_access = self.t
            self._recover()
            self.wait_before_compress, self.wait_before_discard = self._next_waits()
            return

        elapsed = self.t - self.last_access
        if self.policy is not Policy.DISCARD and elapsed >= self.wait_before_discard:
            self._transition(Policy.DISCARD)
        elif self.policy is Policy.KEEP and elapsed >= self.wait_before_compress:
            self._transition(Policy.COMPRESS)
        self._charge_holding()


class ThreeTierKarlinInstance(ThreeTierNaiveInstance):
    """Randomized compress-aware policy; both waits are Karlin samples."""

    def __init__(self, costs: ThreeTierCosts, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.sampled_waits = []
        super().__init__(costs, name="Karlin")

    def _next_waits(self):
        waits = (
            karlin.sample(self.costs.compress_break_even, self.rng),
            karlin.sample(self.costs.discard_break_even, self.rng),
        )
        self.sampled_waits.append(waits)
        return waits
