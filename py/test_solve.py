import json
import logging

import solve
from config import default_config, search_limits
from solve import WINNABLE_SEEDS, main, parse_args


def test_parse_args_defaults():
    args = parse_args([])

    assert args.seed is None
    assert not args.known
    assert not args.partial_runs
    assert args.max_iterations is None


def test_single_seed_writes_record(tmp_path):
    output = tmp_path / "records" / "324.json"

    exit_code = main(["--seed", "324", "--max-iterations", "10", "--output", str(output)])

    assert exit_code == 1
    record = json.loads(output.read_text(encoding="utf-8"))
    assert record["seed"] == 324
    assert record["status"] == "iteration_cap"
    assert record["iterations"] == 10


def test_config_file_sets_limits(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("solver:\n  max_iterations: 5\n", encoding="utf-8")
    output = tmp_path / "out.json"

    main(["--seed", "7", "--config", str(config), "--output", str(output)])

    assert json.loads(output.read_text(encoding="utf-8"))["iterations"] == 5


def test_known_seeds_are_unique():
    assert len(WINNABLE_SEEDS) == len(set(WINNABLE_SEEDS))
    assert WINNABLE_SEEDS == sorted(WINNABLE_SEEDS)


def test_runs_on_builtin_defaults_without_config_file(monkeypatch, caplog):
    monkeypatch.setattr(solve, "find_config_path", lambda: None)
    caplog.set_level(logging.WARNING, logger="config")

    config = solve.read_config(None)

    assert config == default_config()
    assert search_limits(config).max_iterations == 200_000
    assert "missing" not in caplog.text
