"""
Tick Simulator

Drives a single policy instance through a fixed number of ticks against an
access trace and reports the cost it accrued.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from .instance import PolicyInstance
from .trace import AccessTrace


@dataclass
class SimulationResult:
    """Cost breakdown of one simulation run."""
    policy_name: str
    num_ticks: int
    total_cost: float = 0.0
    holding_cost: float = 0.0
    recovery_cost: float = 0.0
    transitions: int = 0
    recoveries: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'policy_name': self.policy_name,
            'num_ticks': self.num_ticks,
            'total_cost': self.total_cost,
            'holding_cost': self.holding_cost,
            'recovery_cost': self.recovery_cost,
            'transitions': self.transitions,
            'recoveries': self.recoveries,
        }


class Simulator:
    """Owns one instance for the length of a run."""

    def __init__(self, access_list: Iterable[int], instance: PolicyInstance):
        self.t = 0
        self.access = AccessTrace.coerce(access_list)
        self.instance = instance

    def tick(self):
        self.t += 1
        self.instance.tick(self.t in self.access)

    def run(self, num_ticks: int,
            progress_callback: Optional[Callable[[int, int], None]] = None) -> SimulationResult:
        for i in range(num_ticks):
            self.tick()
            if progress_callback and i % 10000 == 0:
                progress_callback(i, num_ticks)
        return self.result()

    def result(self) -> SimulationResult:
        stats = self.instance.stats
        return SimulationResult(
            policy_name=self.instance.name,
            num_ticks=self.t,
            total_cost=self.instance.total_accrued_cost(),
            holding_cost=stats['holding_cost'],
            recovery_cost=stats['recovery_cost'],
            transitions=stats['transitions'],
            recoveries=stats['recoveries'],
        )


def run_simulation(access_list: Iterable[int],
                   instance: PolicyInstance,
                   num_ticks: int,
                   progress_callback=None) -> SimulationResult:
    """Run a complete simulation and return its cost breakdown."""
    simulator = Simulator(access_list, instance)
    return simulator.run(num_ticks, progress_callback)
