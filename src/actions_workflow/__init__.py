"""Programmatic builder for GitHub Actions workflow documents.

Example:
    from actions_workflow import Permission, Workflow

    workflow = Workflow("CI")
    workflow.on.push().branches("main")
    workflow.permissions(contents=Permission.READ)
    workflow.job("test").runs_on("ubuntu-latest").step().run("pytest")
    print(workflow.to_yaml())
"""

from __future__ import annotations

from actions_workflow.config import WorkflowSettings, load_settings
from actions_workflow.exceptions import (
    ActionsWorkflowError,
    ConfigError,
    DuplicateKeyError,
    InvalidWorkflowError,
    WorkflowError,
)
from actions_workflow.jobs import Job, Strategy
from actions_workflow.permissions import (
    Permission,
    PermissionConfig,
    PermissionMode,
    PermissionScope,
)
from actions_workflow.steps import Step
from actions_workflow.triggers import InputType, On
from actions_workflow.types import SequenceStyle
from actions_workflow.workflow import Workflow

__version__ = "0.1.0"

__all__ = [
    "ActionsWorkflowError",
    "ConfigError",
    "DuplicateKeyError",
    "InputType",
    "InvalidWorkflowError",
    "Job",
    "On",
    "Permission",
    "PermissionConfig",
    "PermissionMode",
    "PermissionScope",
    "SequenceStyle",
    "Step",
    "Strategy",
    "Workflow",
    "WorkflowError",
    "WorkflowSettings",
    "load_settings",
    "__version__",
]
