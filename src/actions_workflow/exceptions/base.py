from __future__ import annotations


class ActionsWorkflowError(Exception):
    """Root of the errors raised while configuring or rendering a workflow.

    Attributes:
        message: The error text, also passed to ``Exception``.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
