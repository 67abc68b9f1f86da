from __future__ import annotations

from actions_workflow.exceptions.base import ActionsWorkflowError


class WorkflowError(ActionsWorkflowError):
    """Base exception for workflow configuration errors.

    Attributes:
        message: Human-readable error message.
        workflow_name: Name of the workflow being configured (if known).
    """

    def __init__(self, message: str, workflow_name: str | None = None) -> None:
        """Initialize the WorkflowError.

        Args:
            message: Human-readable error message.
            workflow_name: Optional name of the workflow being configured.
        """
        self.workflow_name = workflow_name
        super().__init__(message)


class InvalidWorkflowError(WorkflowError):
    """Raised when a builder receives a value it cannot render.

    Covers blank workflow names, blank job ids and out-of-range numeric
    settings such as a non-positive ``timeout-minutes``.
    """


class DuplicateKeyError(WorkflowError):
    """Raised when a keyed element is registered twice.

    Jobs, steps, workflow inputs, secrets and outputs all live in ordered
    mappings where a second registration under the same key would silently
    replace the first one.

    Attributes:
        message: Human-readable error message.
        key_type: Kind of element (e.g., "job", "step", "input").
        key: The key that was already registered.

    Examples:
        ```python
        raise DuplicateKeyError("job", "build", workflow_name="CI")
        ```
    """

    def __init__(
        self,
        key_type: str,
        key: str,
        workflow_name: str | None = None,
    ) -> None:
        """Initialize the DuplicateKeyError.

        Args:
            key_type: Kind of element being registered.
            key: The key that was already registered.
            workflow_name: Optional name of the owning workflow.
        """
        self.key_type = key_type
        self.key = key
        message = f"Duplicate {key_type} key: '{key}' is already registered"
        if workflow_name:
            message += f" in workflow '{workflow_name}'"
        super().__init__(message, workflow_name=workflow_name)
