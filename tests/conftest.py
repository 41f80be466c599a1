import os
import sys

import pytest

# Ensure repository root is on sys.path so `import tvdispatch` works under pytest
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from tvdispatch.infrastructure.persistence.sqlite import SQLitePersistence  # noqa: E402


@pytest.fixture
def persistence(tmp_path):
    store = SQLitePersistence(tmp_path / "app.db")
    yield store
    store.close()
