"""Online vs offline retention policies, compared by simulated competitive ratio."""

from .config import (
    ConfigurationError,
    ExperimentConfig,
    KarlinSimConfig,
    LoggingConfig,
    ThreeTierCosts,
    TwoTierCosts,
)
from .competitive import calculate_competitive_ratio, create_offline_instance
from .instance import Policy, PolicyInstance
from .karlin import KarlinSamplingError, pdf, sample, sample_many
from .simulator import SimulationResult, Simulator, run_simulation
from .three_tier import ThreeTierKarlinInstance, ThreeTierNaiveInstance, ThreeTierOfflineInstance
from .trace import AccessTrace, TraceCursor, generate_access_list
from .two_tier import KarlinInstance, NaiveInstance, OfflineInstance

__version__ = "0.1.0"
