from __future__ import annotations

from typing import Any

from actions_workflow.exceptions.base import ActionsWorkflowError


class ConfigError(ActionsWorkflowError):
    """An ``ACTIONS_WORKFLOW_*`` variable holds a value the settings reject.

    Attributes:
        field: Settings field that failed validation, e.g. ``"indent"``.
        value: The rejected input as read from the environment.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)
