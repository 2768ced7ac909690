import pytest

from karlin_sim.config import (
    ConfigurationError,
    KarlinSimConfig,
    ThreeTierCosts,
    TwoTierCosts,
    load_default_config,
)
from karlin_sim.instance import Policy
from karlin_sim.three_tier import ThreeTierNaiveInstance


@pytest.mark.parametrize("kwargs", [
    {"keep_cost": 0.0},
    {"keep_cost": -1.0},
    {"recover_cost": 0.0},
])
def test_two_tier_costs_reject_non_positive(kwargs):
    with pytest.raises(ConfigurationError):
        TwoTierCosts(**kwargs)


@pytest.mark.parametrize("kwargs", [
    {"compress_cost": 1.0},                      # not below keep_cost
    {"compress_cost": 1.5},
    {"compress_cost": -0.1},
    {"recover_from_compress_cost": 3.0},         # not below recover_from_discard_cost
    {"recover_from_compress_cost": 4.0},
    {"recover_from_compress_cost": 0.0},
    {"keep_cost": 0.0, "compress_cost": 0.0},
])
def test_three_tier_costs_reject_invariant_violations(kwargs):
    with pytest.raises(ConfigurationError):
        ThreeTierCosts(**kwargs)


def test_invalid_costs_fail_before_any_instance_exists():
    with pytest.raises(ConfigurationError):
        ThreeTierNaiveInstance(ThreeTierCosts(compress_cost=2.0))


def test_costs_are_immutable(two_tier_costs):
    with pytest.raises(AttributeError):
        two_tier_costs.keep_cost = 5.0


def test_cost_lookup_by_policy(two_tier_costs, three_tier_costs):
    assert two_tier_costs.holding_cost(Policy.KEEP) == 1.0
    assert two_tier_costs.recovery_cost(Policy.DISCARD) == 3.0
    with pytest.raises(ConfigurationError):
        two_tier_costs.holding_cost(Policy.COMPRESS)

    assert three_tier_costs.holding_cost(Policy.COMPRESS) == 0.5
    assert three_tier_costs.holding_cost(Policy.DISCARD) == 0.0
    assert three_tier_costs.recovery_cost(Policy.COMPRESS) == 2.0
    assert three_tier_costs.recovery_cost(Policy.DISCARD) == 3.0
    assert three_tier_costs.recovery_cost(Policy.KEEP) == 0.0


def test_default_config_is_valid():
    config = load_default_config()
    config.validate()
    assert config.costs is config.two_tier
    config.experiment.tier = "three"
    assert config.costs is config.three_tier


def test_yaml_round_trip(tmp_path):
    config = KarlinSimConfig.from_dict({
        "two_tier": {"keep_cost": 2.0, "recover_cost": 7.0},
        "experiment": {"tier": "two", "num_trials": 12, "seed": 3},
    })
    path = tmp_path / "configs" / "run.yaml"
    config.to_yaml(str(path))

    loaded = KarlinSimConfig.from_yaml(str(path))
    assert loaded.two_tier == TwoTierCosts(keep_cost=2.0, recover_cost=7.0)
    assert loaded.experiment.num_trials == 12
    assert loaded.experiment.seed == 3
    assert loaded.three_tier == ThreeTierCosts()


def test_from_yaml_validates_costs(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("three_tier:\n  compress_cost: 1.0\n")
    with pytest.raises(ConfigurationError):
        KarlinSimConfig.from_yaml(str(path))


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert KarlinSimConfig.from_yaml(str(path)) == KarlinSimConfig()


@pytest.mark.parametrize("config_dict", [
    {"caches": {}},
    {"two_tier": {"rent": 1.0}},
])
def test_from_dict_rejects_unknown_keys(config_dict):
    with pytest.raises(ConfigurationError):
        KarlinSimConfig.from_dict(config_dict)


@pytest.mark.parametrize("field,value", [
    ("tier", "four"),
    ("num_trials", 0),
    ("trace_length", 0),
    ("max_tick", 0),
    ("num_ticks", -5),
    ("policies", []),
    ("policies", ["lru"]),
])
def test_validate_rejects_bad_experiment(field, value):
    config = KarlinSimConfig()
    setattr(config.experiment, field, value)
    with pytest.raises(ConfigurationError):
        config.validate()


def test_validate_rejects_bad_log_level():
    config = KarlinSimConfig()
    config.logging.log_level = "CHATTY"
    with pytest.raises(ConfigurationError):
        config.validate()
