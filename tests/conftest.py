"""Pytest configuration for the wfs-toolbox test suite.

Selects the non-interactive Agg backend before any test imports pyplot and
provides the configurations and arrays shared by the test modules.
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from wfs_toolbox import WFSConfig, secondary_source_positions  # noqa: E402


@pytest.fixture
def conf():
    """Default configuration with a coarse field grid."""
    return WFSConfig(resolution=40)


@pytest.fixture
def linear_array(conf):
    """Eight loudspeakers on the x axis, 0.15 m apart."""
    return secondary_source_positions(1.05, conf)


@pytest.fixture(autouse=True)
def close_figures():
    """Close figures created by a test."""
    yield
    plt.close("all")
