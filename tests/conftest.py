import numpy as np
import pytest

from karlin_sim.config import ThreeTierCosts, TwoTierCosts


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def two_tier_costs() -> TwoTierCosts:
    return TwoTierCosts(keep_cost=1.0, recover_cost=3.0)


@pytest.fixture
def three_tier_costs() -> ThreeTierCosts:
    return ThreeTierCosts(
        keep_cost=1.0,
        compress_cost=0.5,
        recover_from_compress_cost=2.0,
        recover_from_discard_cost=3.0,
    )
