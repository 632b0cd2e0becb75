import json

import pytest

from main import main


@pytest.fixture
def write_config(tmp_path):
    def _write(run_control):
        config = {
            'simulation_parameters': {'seed': 5, 'particle_count': 20},
            'run_control': dict(run_control, headless=True),
            'logging': {'level': 'INFO', 'log_file': str(tmp_path / "logs" / "run.log")},
        }
        path = tmp_path / "config.json"
        path.write_text(json.dumps(config))
        return str(path)
    return _write


def test_headless_run_stops_after_max_steps(write_config, restore_root_logger):
    assert main(write_config({'max_steps': 3, 'log_throttle_steps': 1})) == 0


@pytest.mark.parametrize("max_steps", [0, -1])
def test_headless_run_requires_a_step_limit(write_config, restore_root_logger, max_steps):
    assert main(write_config({'max_steps': max_steps})) == 1


def test_missing_config_is_fatal(tmp_path, capsys):
    assert main(str(tmp_path / "missing.json")) == 1
    assert "FATAL" in capsys.readouterr().out
