import pytest
from pi.blocks.settings import Settings, reset_settings, set_settings


@pytest.fixture(autouse=True)
def default_settings():
    """Run every test with default settings, independent of PI_BLOCKS_* variables."""
    set_settings(Settings())
    yield
    reset_settings()
