import logging

import pandas as pd
import pytest

from karlin_sim.config import ConfigurationError, KarlinSimConfig
from karlin_sim.experiment import TrialRunner, main
from karlin_sim.three_tier import ThreeTierKarlinInstance
from karlin_sim.two_tier import KarlinInstance, NaiveInstance


@pytest.fixture(autouse=True)
def restore_root_logging():
    handlers = logging.root.handlers[:]
    level = logging.root.level
    yield
    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)


def _config(tier="two", trials=40, seed=7, **experiment):
    config = KarlinSimConfig()
    config.experiment.tier = tier
    config.experiment.num_trials = trials
    config.experiment.seed = seed
    for key, value in experiment.items():
        setattr(config.experiment, key, value)
    return config


def test_create_online_instance_per_tier():
    runner = TrialRunner(_config())
    assert isinstance(runner.create_online_instance("naive"), NaiveInstance)
    assert isinstance(runner.create_online_instance("karlin"), KarlinInstance)

    runner = TrialRunner(_config(tier="three"))
    assert isinstance(runner.create_online_instance("karlin"), ThreeTierKarlinInstance)
    with pytest.raises(ConfigurationError):
        runner.create_online_instance("lru")


def test_runner_rejects_invalid_config():
    with pytest.raises(ConfigurationError):
        TrialRunner(_config(trials=0))


def test_two_tier_trials():
    runner = TrialRunner(_config())
    results = runner.run(show_progress=False)

    assert list(results.columns) == ['trial', 'policy', 'tier', 'trace_length', 'num_ticks',
                                     'online_cost', 'offline_cost', 'ratio']
    assert set(results['policy']) == {"naive", "karlin"}
    assert (results['ratio'] >= 1.0).all()
    naive = results[results['policy'] == "naive"]
    assert (naive['ratio'] <= 2.0).all()

    summary = TrialRunner.summarize(results)
    assert set(summary.index) == {"naive", "karlin"}
    assert list(summary.columns) == ['mean', 'max', 'min', 'std', 'count']


def test_three_tier_trials_with_fixed_horizon():
    runner = TrialRunner(_config(tier="three", num_ticks=120))
    results = runner.run(show_progress=False)
    assert not results.empty
    assert (results['num_ticks'] == 120).all()
    assert (results['ratio'] >= 1.0).all()


def test_trials_are_reproducible_for_a_seed():
    first = TrialRunner(_config(seed=21)).run(show_progress=False)
    second = TrialRunner(_config(seed=21)).run(show_progress=False)
    pd.testing.assert_frame_equal(first, second)


def test_degenerate_traces_are_skipped():
    runner = TrialRunner(_config(trials=5, trace_length=1, max_tick=1))
    results = runner.run(show_progress=False)
    assert results.empty
    assert runner.degenerate_trials == 5


def test_main_prints_summary(capsys):
    exit_code = main(["--trials", "10", "--seed", "3", "--no-progress", "--log-level", "WARNING"])
    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Competitive ratios (two-tier" in out
    assert "naive" in out and "karlin" in out


def test_main_with_yaml_config(tmp_path, capsys):
    config = _config(tier="three", trials=8)
    path = tmp_path / "three.yaml"
    config.to_yaml(str(path))
    assert main(["--config", str(path), "--no-progress", "--log-level", "WARNING"]) == 0
    assert "three-tier" in capsys.readouterr().out


def test_main_rejects_bad_arguments(capsys):
    assert main(["--trials", "0", "--no-progress"]) == 2
    assert "num_trials" in capsys.readouterr().err
