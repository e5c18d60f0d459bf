# Ensure repository root is on sys.path for imports like `from buck_plane.simulator import ...`
import os
import sys

import pytest

_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from buck_plane.types import BuckParams  # noqa: E402
from buck_plane.simulator import simulate  # noqa: E402


@pytest.fixture(scope="session")
def default_params():
    return BuckParams()


@pytest.fixture(scope="session")
def default_run(default_params):
    # Full 60001-sample default run, shared by the slower tests
    return simulate(default_params)


@pytest.fixture
def scenario_dir():
    return os.path.join(_REPO_ROOT, "scenarios")
