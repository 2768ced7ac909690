"""
Karlin Simulator Configuration

This module defines the cost models the policy instances are charged with,
plus the experiment and logging settings used by the trial runner.
"""

import os
import math
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Optional, Union

from .instance import Policy


class ConfigurationError(ValueError):
    """Raised when a cost model or experiment setting is invalid."""


@dataclass(frozen=True)
class TwoTierCosts:
    """Keep/Discard cost model."""

    keep_cost: float = 1.0      # Per-tick cost while kept
    recover_cost: float = 3.0   # One-off cost to recover a discarded resource

    def __post_init__(self):
        if not self.keep_cost > 0:
            raise ConfigurationError(f"keep_cost must be positive, got {self.keep_cost}")
        if not self.recover_cost > 0:
            raise ConfigurationError(f"recover_cost must be positive, got {self.recover_cost}")

    @property
    def break_even(self) -> float:
        """Ticks of keeping that cost as much as one recovery."""
        return self.recover_cost / self.keep_cost

    def holding_cost(self, policy: Policy) -> float:
        if policy is Policy.KEEP:
            return self.keep_cost
        if policy is Policy.DISCARD:
            return 0.0
        raise ConfigurationError(f"Two-tier costs have no {policy.value} tier")

    def recovery_cost(self, policy: Policy) -> float:
        if policy is Policy.KEEP:
            return 0.0
        if policy is Policy.DISCARD:
            return self.recover_cost
        raise ConfigurationError(f"Two-tier costs have no {policy.value} tier")


@dataclass(frozen=True)
class ThreeTierCosts:
    """Keep/Compress/Discard cost model."""

    keep_cost: float = 1.0
    compress_cost: float = 0.5
    recover_from_compress_cost: float = 2.0
    recover_from_discard_cost: float = 3.0

    def __post_init__(self):
        if not self.keep_cost > 0:
            raise ConfigurationError(f"keep_cost must be positive, got {self.keep_cost}")
        if not 0 <= self.compress_cost < self.keep_cost:
            raise ConfigurationError(
                f"compress_cost must be in [0, keep_cost={self.keep_cost}), "
                f"got {self.compress_cost}"
            )
        if not self.recover_from_compress_cost > 0:
            raise ConfigurationError(
                f"recover_from_compress_cost must be positive, "
                f"got {self.recover_from_compress_cost}"
            )
        if not self.recover_from_compress_cost < self.recover_from_discard_cost:
            raise ConfigurationError(
                f"recover_from_compress_cost ({self.recover_from_compress_cost}) must be "
                f"below recover_from_discard_cost ({self.recover_from_discard_cost})"
            )

    @property
    def keep_threshold(self) -> float:
        """Gap length above which compressing beats keeping."""
        return self.recover_from_compress_cost / (self.keep_cost - self.compress_cost)

    @property
    def compress_threshold(self) -> float:
        """Gap length above which discarding beats compressing."""
        if self.compress_cost == 0:
            return math.inf
        return (self.recover_from_discard_cost - self.recover_from_compress_cost) / self.compress_cost

    @property
    def discard_break_even(self) -> float:
        return self.recover_from_discard_cost / self.keep_cost

    @property
    def compress_break_even(self) -> float:
        return self.recover_from_compress_cost / self.keep_cost

    def holding_cost(self, policy: Policy) -> float:
        return {
            Policy.KEEP: self.keep_cost,
            Policy.COMPRESS: self.compress_cost,
            Policy.DISCARD: 0.0,
        }[policy]

    def recovery_cost(self, policy: Policy) -> float:
        return {
            Policy.KEEP: 0.0,
            Policy.COMPRESS: self.recover_from_compress_cost,
            Policy.DISCARD: self.recover_from_discard_cost,
        }[policy]


Costs = Union[TwoTierCosts, ThreeTierCosts]


@dataclass
class ExperimentConfig:
    """Trial runner settings."""

    tier: str = "two"            # "two" or "three"
    num_trials: int = 100
    trace_length: int = 10       # Draws per trace, before dedup
    max_tick: int = 100          # Accesses are drawn from [1, max_tick]
    num_ticks: Optional[int] = None  # None runs each trace up to its last access
    seed: Optional[int] = 42
    policies: List[str] = field(default_factory=lambda: ["naive", "karlin"])


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "./logs/karlin_sim.log"


@dataclass
class KarlinSimConfig:
    """Complete configuration for a competitive-ratio experiment."""

    two_tier: TwoTierCosts = field(default_factory=TwoTierCosts)
    three_tier: ThreeTierCosts = field(default_factory=ThreeTierCosts)
    experiment: ExperimentConfig = field(default_factory=ExperimentConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def costs(self) -> Costs:
        """Cost model selected by ``experiment.tier``."""
        return self.two_tier if self.experiment.tier == "two" else self.three_tier

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "KarlinSimConfig":
        config_dict = config_dict or {}
        unknown = set(config_dict) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(f"Unknown configuration sections: {sorted(unknown)}")

        sections = {}
        section_types = {
            'two_tier': TwoTierCosts,
            'three_tier': ThreeTierCosts,
            'experiment': ExperimentConfig,
            'logging': LoggingConfig,
        }
        for section_name, section_type in section_types.items():
            section_data = config_dict.get(section_name) or {}
            try:
                sections[section_name] = section_type(**section_data)
            except TypeError as e:
                raise ConfigurationError(f"Invalid '{section_name}' section: {e}") from e

        return cls(**sections)

    @classmethod
    def from_yaml(cls, config_path: str) -> "KarlinSimConfig":
        """Load configuration from YAML file."""
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_yaml(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        config_dir = os.path.dirname(config_path)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)
        with open(config_path, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, indent=2)

    def validate(self) -> None:
        """Validate experiment and logging parameters.

        Cost sections validate themselves on construction.
        """
        exp = self.experiment
        if exp.tier not in ("two", "three"):
            raise ConfigurationError(f"tier must be 'two' or 'three', got {exp.tier!r}")
        if exp.num_trials <= 0:
            raise ConfigurationError("num_trials must be positive")
        if exp.trace_length <= 0:
            raise ConfigurationError("trace_length must be positive")
        if exp.max_tick <= 0:
            raise ConfigurationError("max_tick must be positive")
        if exp.num_ticks is not None and exp.num_ticks <= 0:
            raise ConfigurationError("num_ticks must be positive when set")
        if not exp.policies:
            raise ConfigurationError("at least one online policy is required")
        for name in exp.policies:
            if name not in ("naive", "karlin"):
                raise ConfigurationError(f"Unknown online policy: {name!r}")

        if self.logging.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"Unknown log level: {self.logging.log_level!r}")


def load_default_config() -> KarlinSimConfig:
    """Load default configuration."""
    return KarlinSimConfig()
