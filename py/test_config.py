import logging

import pytest
from config import (
    CHECKOUT_CONFIG_PATH,
    CONFIG_FILENAME,
    DotDict,
    default_config,
    find_config_path,
    get_config_value,
    load_config,
    search_limits,
    search_policy,
)
from solver import DEFAULT_MAX_ITERATIONS


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "solver:\n  max_iterations: 500\n  partial_runs: true\nbatch:\n  count: 10\n",
        encoding="utf-8",
    )
    return path


def test_load_config(config_file):
    config = load_config(config_file)

    assert isinstance(config, DotDict)
    assert config.solver.max_iterations == 500
    assert get_config_value(config, "batch.count") == 10


def test_search_settings_from_config(config_file):
    config = load_config(config_file)

    assert search_limits(config).max_iterations == 500
    policy = search_policy(config)
    assert policy.partial_runs
    assert not policy.prune_revisited


def test_missing_key_uses_default(caplog):
    caplog.set_level(logging.WARNING, logger="config")

    assert get_config_value(DotDict(), "solver.max_iterations", 7) == 7
    assert "solver.max_iterations" in caplog.text
    assert search_limits(DotDict()).max_iterations == DEFAULT_MAX_ITERATIONS


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_non_mapping_root(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == {}


def test_shipped_file_matches_builtin_defaults():
    assert load_config(CHECKOUT_CONFIG_PATH) == default_config()


def test_builtin_defaults():
    config = default_config()

    assert config.batch.count == 100
    assert search_limits(config).max_iterations == DEFAULT_MAX_ITERATIONS
    assert not search_policy(config).partial_runs
    # callers get their own copy
    config["batch"]["count"] = 5
    assert default_config().batch.count == 100


def test_nested_sections_are_dot_dicts(config_file):
    config = load_config(config_file)

    assert isinstance(config.solver, DotDict)
    with pytest.raises(AttributeError):
        _ = config.missing


def test_find_config_prefers_working_directory(tmp_path, monkeypatch, config_file):
    monkeypatch.chdir(tmp_path)
    assert config_file.name == CONFIG_FILENAME
    found = find_config_path()
    assert found is not None
    assert found.resolve() == config_file.resolve()


def test_find_config_without_any_file(tmp_path):
    assert find_config_path([tmp_path / "a.yaml", tmp_path / "b.yaml"]) is None
