import json
import logging
import logging.handlers
from pathlib import Path

import pytest

from utils import DEFAULT_CONFIG, load_config, merge_config, setup_logging


def test_merge_config_is_deep_and_non_destructive():
    defaults = {'a': {'x': 1, 'y': 2}, 'b': 3}
    overrides = {'a': {'y': 20}, 'c': [1]}

    merged = merge_config(defaults, overrides)

    assert merged == {'a': {'x': 1, 'y': 20}, 'b': 3, 'c': [1]}
    assert defaults == {'a': {'x': 1, 'y': 2}, 'b': 3}


def test_load_config_fills_missing_sections(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'entropy': {'grid_size': 16}, 'run_control': {'max_steps': 10}}))

    config = load_config(str(path))

    assert config['entropy'] == {'grid_size': 16}
    assert config['run_control']['max_steps'] == 10
    assert config['run_control']['log_throttle_steps'] == 100
    assert config['logging'] == DEFAULT_CONFIG['logging']
    assert config['simulation_parameters'] == {}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_load_config_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_load_config_requires_an_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_shipped_config_loads():
    config = load_config(str(Path(__file__).resolve().parent.parent / "config.json"))
    assert config['entropy']['history_capacity'] == 600
    assert config['simulation_parameters']['collision_mode'] == 'sequential'


def test_setup_logging_installs_console_and_rotating_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "run.log"

    setup_logging({'level': 'debug', 'log_file': str(log_file)})
    setup_logging({'level': 'debug', 'log_file': str(log_file)})

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    assert log_file.parent.is_dir()
