"""
Pytest configuration and shared fixtures for mcmclab tests.
"""

import jax

jax.config.update("jax_enable_x64", True)

import jax.random as jr
import pytest

from mcmclab import KernelParams, get_target


# ==============================================================================
# Shared Fixtures
# ==============================================================================


@pytest.fixture
def key():
    return jr.PRNGKey(0)


@pytest.fixture
def keys():
    """Batch of independent step keys for vmapped kernel checks."""
    return jr.split(jr.PRNGKey(1234), 2000)


@pytest.fixture
def default_params():
    return KernelParams(step_size=0.5, leapfrog_steps=10, leapfrog_epsilon=0.1)


@pytest.fixture(params=['gaussian', 'bimodal', 'donut', 'banana'])
def model(request):
    return get_target(request.param)


# ==============================================================================
# Slow Test Marker
# ==============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
