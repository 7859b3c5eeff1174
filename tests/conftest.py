"""
Shared pytest fixtures.

Tests run against the bundled sample data and the configs under config/,
whose paths are relative to the project root, so every test executes with
the project root as working directory. Figures are rendered with the
non-interactive Agg backend.
"""

from __future__ import annotations

import os

import matplotlib

matplotlib.use("Agg")

import pytest
import yaml


PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_CONFIG_PATH = "config/data.yaml"


@pytest.fixture(autouse=True)
def _run_from_project_root(monkeypatch):
    monkeypatch.chdir(PROJECT_ROOT)


@pytest.fixture
def data_cfg():
    from postmining.data.datasets import load_data_config

    return load_data_config(DATA_CONFIG_PATH)


@pytest.fixture
def write_yaml(tmp_path):
    """Write a dict to a YAML file under tmp_path and return its path."""

    def _write(name, content):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(content, f)
        return str(path)

    return _write
