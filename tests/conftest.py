"""Pytest configuration and shared fixtures for descent tests.

This module provides:
- A deterministic numpy RNG fixture
- Global numpy and torch seeding for every test
"""

import os

import numpy as np
import pytest
import torch


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).

    Returns:
        A seeded numpy.random.Generator instance.
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Seed the numpy and torch global generators before every test."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())

