import sys

import pytest
from loguru import logger

from config import SimulationInput


@pytest.fixture
def scenario_a():
    return SimulationInput(
        current_age=22,
        retirement_age=65,
        annual_income=65_000,
        invest_percent=20,
        stock_growth_percent=13,
        roth=True,
    )


@pytest.fixture
def scenario_a_params():
    return {
        "current_age": 22,
        "retirement_age": 65,
        "annual_income": 65_000,
        "invest_percent": 20,
        "stock_growth_percent": 13,
        "roth": True,
    }


@pytest.fixture
def log_messages():
    """Collects loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)
