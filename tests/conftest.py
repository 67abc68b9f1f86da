from __future__ import annotations

import logging
import os
from collections.abc import Generator

import pytest

from actions_workflow.config import WorkflowSettings
from actions_workflow.workflow import Workflow


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for the test environment.

    Runs automatically for every test so log output goes to stderr at
    WARNING level and never mixes with rendered documents.
    """
    from actions_workflow.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all ACTIONS_WORKFLOW_ environment variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("ACTIONS_WORKFLOW_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def settings() -> WorkflowSettings:
    """Default rendering settings, independent of the environment."""
    return WorkflowSettings(line_width=4096, indent=2, allow_unicode=True)


@pytest.fixture
def workflow() -> Workflow:
    """A fresh workflow named CI."""
    return Workflow("CI")
