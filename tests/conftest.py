import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    # run_cli() points structlog at the (captured) stderr of whichever test ran it
    yield
    structlog.reset_defaults()
