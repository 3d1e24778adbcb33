import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import lazy_aad


@pytest.fixture(autouse=True)
def fresh_tape():
    """Every test builds its graph on its own tape with default engine settings."""
    saved = lazy_aad.get_engine_config()
    with lazy_aad.use_tape() as tape:
        yield tape
    lazy_aad.set_engine_config(**saved)
