"""actions-workflow exception hierarchy.

All exceptions can be imported from this package:
    from actions_workflow.exceptions import DuplicateKeyError, WorkflowError
"""

from __future__ import annotations

# Base exception
from actions_workflow.exceptions.base import ActionsWorkflowError

# Configuration exceptions
from actions_workflow.exceptions.config import ConfigError

# Workflow configuration exceptions
from actions_workflow.exceptions.workflow import (
    DuplicateKeyError,
    InvalidWorkflowError,
    WorkflowError,
)

__all__ = [
    "ActionsWorkflowError",
    "ConfigError",
    "DuplicateKeyError",
    "InvalidWorkflowError",
    "WorkflowError",
]
