import pytest

from infrastructure.container import container


@pytest.fixture(autouse=True)
def reset_container():
    """Every test starts with fresh services built from the current settings."""
    container.reset()
    yield
    container.reset()
