from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture  # type: ignore[misc]
def counter_js() -> Path:
    return FIXTURES / "counter.js"
