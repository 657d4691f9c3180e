import logging

import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_mdtoc_logger():
    """Drops handlers the CLI installs so later tests never log to a closed stream."""
    yield
    logger = logging.getLogger("mdtoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
