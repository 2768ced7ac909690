"""
Competitive Ratio Trials

Repeats (random trace -> online vs offline cost) many times for each online
policy and aggregates the ratios per policy.
"""

import sys
import math
import logging
import argparse
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from .competitive import compare, ratio
from .config import ConfigurationError, KarlinSimConfig, load_default_config
from .instance import PolicyInstance
from .three_tier import ThreeTierKarlinInstance, ThreeTierNaiveInstance
from .trace import generate_access_list
from .two_tier import KarlinInstance, NaiveInstance
from .utils import make_rng, setup_logging

ONLINE_POLICIES = {
    "two": {"naive": NaiveInstance, "karlin": KarlinInstance},
    "three": {"naive": ThreeTierNaiveInstance, "karlin": ThreeTierKarlinInstance},
}


class TrialRunner:
    """Runs competitive-ratio trials over random access traces."""

    def __init__(self, config: KarlinSimConfig, rng: Optional[np.random.Generator] = None):
        config.validate()
        self.config = config
        self.rng = rng if rng is not None else make_rng(config.experiment.seed)
        self.logger = logging.getLogger(__name__)

        self.degenerate_trials = 0

    def create_online_instance(self, name: str) -> PolicyInstance:
        tier = self.config.experiment.tier
        try:
            instance_class = ONLINE_POLICIES[tier][name]
        except KeyError:
            raise ConfigurationError(f"No online policy {name!r} for the {tier}-tier model") from None

        if name == "karlin":
            return instance_class(self.config.costs, rng=self.rng)
        return instance_class(self.config.costs)

    def run_trial(self, trial: int) -> List[Dict[str, Any]]:
        """Run every configured online policy on one fresh trace."""
        exp = self.config.experiment
        trace = generate_access_list(exp.trace_length, exp.max_tick, self.rng)
        num_ticks = exp.num_ticks or trace.last

        records = []
        for name in exp.policies:
            online = self.create_online_instance(name)
            offline_result, online_result = compare(online, self.config.costs, trace, num_ticks)

            if offline_result.total_cost == 0:
                self.degenerate_trials += 1
                self.logger.debug(f"Trial {trial}: zero offline cost for trace {list(trace)}, skipped")
                return []

            records.append({
                'trial': trial,
                'policy': name,
                'tier': exp.tier,
                'trace_length': len(trace),
                'num_ticks': num_ticks,
                'online_cost': online_result.total_cost,
                'offline_cost': offline_result.total_cost,
                'ratio': ratio(online_result.total_cost, offline_result.total_cost),
            })
        return records

    def run(self, show_progress: bool = True) -> pd.DataFrame:
        """Run all trials and return one row per (trial, policy)."""
        exp = self.config.experiment
        self.degenerate_trials = 0
        self.logger.info(f"Running {exp.num_trials} {exp.tier}-tier trials "
                         f"for policies {exp.policies} with costs {self.config.costs}")

        records = []
        for trial in tqdm(range(exp.num_trials), desc="Trials", disable=not show_progress):
            records.extend(self.run_trial(trial))

        if self.degenerate_trials:
            self.logger.warning(f"Skipped {self.degenerate_trials} trials with zero offline cost")

        columns = ['trial', 'policy', 'tier', 'trace_length', 'num_ticks',
                   'online_cost', 'offline_cost', 'ratio']
        return pd.DataFrame(records, columns=columns)

    @staticmethod
    def summarize(results: pd.DataFrame) -> pd.DataFrame:
        """Per-policy ratio statistics."""
        return results.groupby('policy')['ratio'].agg(['mean', 'max', 'min', 'std', 'count'])


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point."""
    parser = argparse.ArgumentParser(description="Competitive ratio of online retention policies")
    parser.add_argument("--config", type=str, help="YAML configuration file path")
    parser.add_argument("--tier", choices=["two", "three"], help="Cost model")
    parser.add_argument("--trials", type=int, help="Number of random traces")
    parser.add_argument("--trace-length", type=int, help="Draws per trace")
    parser.add_argument("--max-tick", type=int, help="Largest access tick")
    parser.add_argument("--num-ticks", type=int, help="Simulation horizon (default: last access)")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--log-level", type=str, help="Logging level")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")

    args = parser.parse_args(argv)

    if args.config:
        config = KarlinSimConfig.from_yaml(args.config)
    else:
        config = load_default_config()

    exp = config.experiment
    if args.tier:
        exp.tier = args.tier
    if args.trials is not None:
        exp.num_trials = args.trials
    if args.trace_length is not None:
        exp.trace_length = args.trace_length
    if args.max_tick is not None:
        exp.max_tick = args.max_tick
    if args.num_ticks is not None:
        exp.num_ticks = args.num_ticks
    if args.seed is not None:
        exp.seed = args.seed
    if args.log_level:
        config.logging.log_level = args.log_level

    try:
        config.validate()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.logging)

    runner = TrialRunner(config)
    results = runner.run(show_progress=not args.no_progress)
    if results.empty:
        print("No non-degenerate trials; nothing to report")
        return 1

    summary = TrialRunner.summarize(results)
    print(f"\nCompetitive ratios ({exp.tier}-tier, {config.costs}):")
    print(summary.to_string(float_format=lambda v: f"{v:.3f}"))
    print(f"Karlin bound e/(e-1) = {math.e / (math.e - 1):.3f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
