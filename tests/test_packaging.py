"""
Tests for the package metadata in pyproject.toml.
"""

import importlib
import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _project():
    with PYPROJECT.open("rb") as f:
        return tomllib.load(f)["project"]


def test_requires_python_matches_solana_agent():
    # solana-agent 31 needs Python 3.12
    assert _project()["requires-python"].startswith(">=3.12")


def test_every_entry_point_resolves_to_a_plugin():
    entry_points = _project()["entry-points"]["solana_agent.plugins"]

    assert "solana_launch_pumpfun" in entry_points
    for name, target in entry_points.items():
        module_name, attr = target.split(":")
        plugin = getattr(importlib.import_module(module_name), attr)()
        assert plugin.name == name
