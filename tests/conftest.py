import os
import sys

import pytest
import QuantLib as ql

# Allow running tests without installing the package.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from curve_engine.settings import Settings  # noqa: E402

TODAY = ql.Date(15, 1, 2025)


@pytest.fixture
def settings():
    """Fresh session with the evaluation date set to TODAY."""
    s = Settings()
    s.evaluation_date.set(TODAY)
    yield s
    s.reset()
