from collections.abc import Iterator

import pytest

from ifrs16_lite.infra.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _propagating_logs() -> Iterator[None]:
    """Importing the app configures JSON logging; tests read records through caplog instead."""
    reset_logging()
    yield
    reset_logging()
