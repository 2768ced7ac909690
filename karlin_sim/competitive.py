"""
Competitive Ratio

Runs an online instance and the matching offline optimum over the same trace
and divides their costs.
"""

import math
import logging
from typing import Iterable, Tuple

from .config import Costs, ThreeTierCosts, TwoTierCosts
from .instance import PolicyInstance
from .simulator import SimulationResult, run_simulation
from .three_tier import ThreeTierOfflineInstance
from .trace import AccessTrace
from .two_tier import OfflineInstance

logger = logging.getLogger(__name__)


def create_offline_instance(costs: Costs, access_list: Iterable[int]) -> PolicyInstance:
    """Offline optimum for the tier described by ``costs``."""
    if isinstance(costs, ThreeTierCosts):
        return ThreeTierOfflineInstance(costs, access_list)
    if isinstance(costs, TwoTierCosts):
        return OfflineInstance(costs, access_list)
    raise TypeError(f"Unsupported cost model: {type(costs).__name__}")


def ratio(online_cost: float, offline_cost: float) -> float:
    """``online / offline``; inf or nan when the offline cost is zero."""
    if offline_cost == 0:
        logger.warning(f"Offline cost is zero (online cost {online_cost}); ratio is undefined")
        return math.inf if online_cost > 0 else math.nan
    return online_cost / offline_cost


def compare(online: PolicyInstance, costs: Costs, access_list: Iterable[int],
            num_ticks: int) -> Tuple[SimulationResult, SimulationResult]:
    """Simulate the offline optimum and ``online``; returns (offline, online) results."""
    trace = AccessTrace.coerce(access_list)
    # Accesses past the horizon never happen as far as the optimum is concerned.
    offline = create_offline_instance(costs, trace.within(num_ticks))

    offline_result = run_simulation(trace, offline, num_ticks)
    online_result = run_simulation(trace, online, num_ticks)
    logger.debug(f"{online_result.policy_name}: online={online_result.total_cost} "
                 f"offline={offline_result.total_cost} over {num_ticks} ticks")
    return offline_result, online_result


def calculate_competitive_ratio(online: PolicyInstance, costs: Costs,
                                access_list: Iterable[int], num_ticks: int) -> float:
    """
    Competitive ratio of ``online`` on a trace.

    Args:
        online: Fresh online instance (consumed by the run)
        costs: Cost model shared by both instances
        access_list: Ascending access ticks
        num_ticks: Simulation horizon

    Returns:
        online_cost / offline_cost
    """
    offline_result, online_result = compare(online, costs, access_list, num_ticks)
    return ratio(online_result.total_cost, offline_result.total_cost)
