# utils.py
"""
Utility functions for the simulation framework.

This module provides helper functions, such as logging setup and config
loading, that are used across the application but do not belong to a
specific domain like motion or rendering.
"""
import copy
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional
from constants import DEFAULT_CONFIG
from simulation import MotionRule

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and a rotating file handler. Creates the log directory.
#   - Raises: ValueError for an unknown "level", before any handler changes.
#
# load_config(path: str, required: bool = False) -> Dict[str, Any]:
#   - Outputs: DEFAULT_CONFIG with each section updated from the file.
#     A missing file yields the defaults unless `required` is set.
#
# validate_config(config: Dict[str, Any]) -> None:
#   - Raises: ValueError on an unusable value, after a CRITICAL log.

def resolve_log_level(name: Any) -> int:
    """
    Maps a level name such as "debug" to its numeric logging level.

    Raises:
        ValueError: If `name` is not a standard level name.
    """
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Routes the root logger to the console and a rotating log file.

    The level is resolved before any handler is touched, so a bad level
    leaves the existing logging setup in place.
    """
    log_config = config.get('logging', {})
    log_level = resolve_log_level(log_config.get('level', 'INFO'))
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/particles.log')

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(log_level)

    formatter = logging.Formatter(log_format)
    # Console output plus a 1MB file kept with 5 backups.
    handlers = [
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(log_file_path, maxBytes=1024*1024, backupCount=5),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.info(f"Logging to console and {log_file_path} at {logging.getLevelName(log_level)}.")

def load_config(path: str, required: bool = False) -> Dict[str, Any]:
    """Loads a JSON configuration file on top of the built-in defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not os.path.exists(path):
        if required:
            logging.error(f"Configuration file not found at {path}.")
            raise FileNotFoundError(path)
        logging.warning(f"No configuration file at {path}. Using built-in defaults.")
        return config

    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            loaded = json.load(f)
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    logging.info("Configuration loaded successfully.")
    return config

def _fail(msg: str) -> None:
    logging.critical(msg)
    raise ValueError(msg)

def validate_config(config: Dict[str, Any]) -> None:
    """Checks the values the simulation cannot run without."""
    sim_params = config.get('simulation_parameters', {})
    vis_params = config.get('visualization', {})

    count = sim_params.get('particle_count')
    if not isinstance(count, int) or isinstance(count, bool) or count < 1:
        _fail(f"Configuration error: particle_count must be a positive integer, got {count!r}.")

    try:
        MotionRule.from_config(sim_params.get('motion_rule'))
    except ValueError as e:
        _fail(f"Configuration error: {e}.")

    for key in ('width_ratio', 'height_ratio', 'fps'):
        value = vis_params.get(key)
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            _fail(f"Configuration error: visualization.{key} must be positive, got {value!r}.")

    window_size: Optional[list] = vis_params.get('window_size')
    if window_size is not None and (
        not isinstance(window_size, (list, tuple))
        or len(window_size) != 2
        or any(not isinstance(v, int) or isinstance(v, bool) or v <= 0 for v in window_size)
    ):
        _fail(f"Configuration error: window_size must be two positive integers, got {window_size!r}.")

    logging.info("Configuration validated.")
