"""
Shared helpers for configuration, filesystem and logging.

This module centralizes functionality used across the walkthrough:

- loading YAML configuration files (config/data.yaml, config/run.yaml)
- ensuring directories exist before writing figures, tables and artifacts
- constructing loggers that respect the logging section of config/run.yaml
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml


DEFAULT_RUN_CONFIG_PATH = "config/run.yaml"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_yaml(path: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file and return it as a dictionary.

    Parameters
    ----------
    path : str
        Path to the YAML file.

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content.

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    ValueError
        If the YAML file is empty or cannot be parsed into a mapping.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    if not isinstance(cfg, dict):
        raise ValueError(f"Config file is empty or invalid: {path}")

    return cfg


def load_run_config(config_path: str = DEFAULT_RUN_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the run configuration dictionary.

    The run config holds output locations ("paths"), logging options
    ("logging"), figure settings ("plots") and persistence flags ("save").
    We keep this permissive: downstream code reads the keys it needs with
    defaults.
    """
    return load_yaml(config_path)


# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------


def ensure_dir_exists(path: str) -> None:
    """
    Ensure that a directory exists (create it if necessary).
    """
    if path and not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------


def parse_log_level(level: Optional[str]) -> int:
    """
    Map a level name such as "debug" or "WARNING" to its logging constant.

    Unknown or empty names map to INFO.
    """
    value = logging.getLevelName((level or "INFO").upper())
    return value if isinstance(value, int) else logging.INFO


def log_file_path(config: Dict[str, Any], log_file_suffix: Optional[str] = None) -> str:
    """
    Path of the log file for a run: <logs_dir>/<file_prefix>[_<suffix>].log
    """
    logging_cfg = config.get("logging", {}) or {}
    paths_cfg = config.get("paths", {}) or {}

    stem = logging_cfg.get("file_prefix", "postmining")
    if log_file_suffix:
        stem = f"{stem}_{log_file_suffix}"
    return os.path.join(paths_cfg.get("logs_dir", "outputs/logs"), f"{stem}.log")


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)


def get_logger(
    name: str,
    config: Optional[Dict[str, Any]] = None,
    log_file_suffix: Optional[str] = None,
) -> logging.Logger:
    """
    Construct and return a logger that respects the logging section of
    the run config.

    Parameters
    ----------
    name : str
        Logger name.
    config : Optional[Dict[str, Any]]
        Run configuration. When None, a console-only INFO logger is built.
    log_file_suffix : Optional[str]
        Optional suffix appended to the log file name (e.g., "walkthrough").

    Returns
    -------
    logging.Logger
        Configured logger instance. A logger that already has handlers is
        returned as is.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    config = config or {}
    logging_cfg = config.get("logging", {}) or {}
    level = parse_log_level(logging_cfg.get("level"))
    logger.setLevel(level)

    _attach(logger, logging.StreamHandler(), level)

    if bool(logging_cfg.get("to_file", False)):
        path = log_file_path(config, log_file_suffix)
        ensure_dir_exists(os.path.dirname(path))
        _attach(logger, logging.FileHandler(path, encoding="utf-8"), level)

    logger.propagate = False
    return logger
