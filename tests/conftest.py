# SPDX-License-Identifier: MIT
"""Pytest configuration and shared fixtures for test suite.

This module provides:
- Deterministic test environment setup
- Series table fixtures
- A brute-force reference for nearest-value checks
"""
from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest

from restool.series import SERIES, Series

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).resolve().parent
ROOT_DIR = TESTS_DIR.parent


# ---------------------------------------------------------------------------
# Environment Setup
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest environment for determinism.

    Sets environment variables to ensure reproducible test execution.
    """
    deterministic_env = {
        "LC_ALL": "C",
        "LANG": "C",
        "TZ": "UTC",
        "PYTHONHASHSEED": "0",
    }
    for key, value in deterministic_env.items():
        os.environ.setdefault(key, value)


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's RESTOOL_CONFIG from leaking into tests."""
    monkeypatch.delenv("RESTOOL_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# Fixtures: Series
# ---------------------------------------------------------------------------


@pytest.fixture(params=sorted(SERIES, key=lambda name: SERIES[name].n))
def any_series(request: pytest.FixtureRequest) -> Series:
    """Each built-in series in turn."""
    return SERIES[request.param]


@pytest.fixture(scope="session")
def e24() -> Series:
    return SERIES["E24"]


@pytest.fixture(scope="session")
def series_grid() -> Callable[[Series, int, int], np.ndarray]:
    """Return every series value from decade ``lo`` up to decade ``hi`` inclusive."""

    def _grid(series: Series, lo: int, hi: int) -> np.ndarray:
        mantissas = np.asarray(series.mantissas)
        decades = [mantissas * 10.0**exponent for exponent in range(lo, hi + 1)]
        return np.concatenate(decades)

    return _grid


@pytest.fixture(scope="session")
def sample_values() -> np.ndarray:
    """Deterministic log-uniform samples covering milliohms to gigaohms."""
    rng = np.random.default_rng(60063)
    return 10.0 ** rng.uniform(-3.0, 9.0, size=400)
