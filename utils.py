# utils.py
"""
Utility functions for the simulation framework.

Configuration loading and logging setup live here because every other
module uses them but none of them owns them.
"""
import copy
import json
import logging
import logging.handlers
import os
from typing import Any, Dict

# --- Data Contracts ---
#
# setup_logging(log_config: Dict[str, Any]) -> None:
#   - Inputs:
#     - log_config: the "logging" section of config.json, with optional
#       "level", "format" and "log_file" keys.
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and a rotating file handler. Creates the log directory.
#
# merge_config(defaults, overrides) -> Dict[str, Any]:
#   - Outputs: A new dictionary; nested dictionaries are merged key by key,
#     any other value in `overrides` replaces the default.
#   - Invariants: Neither input is modified.

DEFAULT_CONFIG: Dict[str, Any] = {
    'simulation_parameters': {},
    'entropy': {},
    'run_control': {
        'max_steps': 0,
        'log_throttle_steps': 100,
        'headless': False,
        'profile': False,
    },
    'visualization': {},
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(levelname)s - %(message)s',
        'log_file': 'logs/simulation.log',
    },
}


def setup_logging(log_config: Dict[str, Any]) -> None:
    """
    Configures the root logger for console and rotating-file output.
    """
    level = str(log_config.get('level', 'INFO')).upper()
    fmt = log_config.get('format', DEFAULT_CONFIG['logging']['format'])
    log_file = log_config.get('log_file', DEFAULT_CONFIG['logging']['log_file'])

    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    # Repeated calls must not stack handlers.
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    # 1 MB per file, 5 backups.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=1024 * 1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level {level}, writing to {log_file}.")


def merge_config(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merges `overrides` onto a copy of `defaults`."""
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(path: str) -> Dict[str, Any]:
    """
    Loads a JSON configuration file and fills in missing sections and keys
    from DEFAULT_CONFIG.
    """
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration in {path} must be a JSON object, got {type(config).__name__}."
        logging.error(msg)
        raise ValueError(msg)

    logging.info("Configuration loaded successfully.")
    return merge_config(DEFAULT_CONFIG, config)
