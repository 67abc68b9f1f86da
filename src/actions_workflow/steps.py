"""Step builder for job ``steps`` sequences."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from yaml.nodes import SequenceNode

from actions_workflow.exceptions import InvalidWorkflowError
from actions_workflow.nodes import add_mapping, add_node, mapping_node
from actions_workflow.types import ScalarValue, SequenceStyle

if TYPE_CHECKING:
    from actions_workflow.jobs import Job
    from actions_workflow.workflow import Workflow

__all__ = ["Step"]


class Step:
    """One entry of a job's ``steps`` list.

    A step either ``uses`` an action or ``run``s a script. Keys render in a
    fixed order: ``id``, ``name``, ``if``, ``uses``, ``with``, ``run``,
    ``shell``, ``working-directory``, ``env``, ``continue-on-error``,
    ``timeout-minutes``.

    Attributes:
        job: The owning job.
        step_id: Optional identifier, unique within the job.
    """

    def __init__(self, job: Job, step_id: str | None = None) -> None:
        self.job = job
        self.step_id = step_id
        self._name: str | None = None
        self._if: str | None = None
        self._uses: str | None = None
        self._with: dict[str, ScalarValue] = {}
        self._run: str | None = None
        self._shell: str | None = None
        self._working_directory: str | None = None
        self._env: dict[str, str] = {}
        self._continue_on_error: bool | None = None
        self._timeout_minutes: int | None = None

    @property
    def workflow(self) -> Workflow:
        return self.job.workflow

    def name(self, name: str) -> Step:
        self._name = name
        return self

    def if_(self, condition: str) -> Step:
        """Run the step only when ``condition`` holds (the ``if`` key)."""
        self._if = condition
        return self

    def uses(self, action: str) -> Step:
        self._uses = action
        return self

    def with_(self, inputs: Mapping[str, ScalarValue]) -> Step:
        """Replace the action inputs (the ``with`` key)."""
        self._with = dict(inputs)
        return self

    def run(self, script: str) -> Step:
        """Set the command to run; multi-line scripts render as a literal block."""
        self._run = script
        return self

    def shell(self, shell: str) -> Step:
        self._shell = shell
        return self

    def working_directory(self, path: str) -> Step:
        self._working_directory = path
        return self

    def env(self, environment: Mapping[str, str]) -> Step:
        self._env = dict(environment)
        return self

    def continue_on_error(self, enabled: bool = True) -> Step:
        self._continue_on_error = enabled
        return self

    def timeout_minutes(self, minutes: int) -> Step:
        if minutes <= 0:
            raise InvalidWorkflowError(
                f"Step timeout must be positive, got {minutes}",
                workflow_name=self.workflow.name,
            )
        self._timeout_minutes = minutes
        return self

    def build(self, parent: SequenceNode, sequence_style: SequenceStyle) -> None:
        """Append this step's mapping to the ``steps`` sequence."""
        node = mapping_node()
        if self.step_id:
            add_node(node, "id", self.step_id)
        if self._name:
            add_node(node, "name", self._name)
        if self._if:
            add_node(node, "if", self._if)
        if self._uses:
            add_node(node, "uses", self._uses)
        add_mapping(node, "with", self._with, sequence_style)
        if self._run:
            add_node(node, "run", self._run)
        if self._shell:
            add_node(node, "shell", self._shell)
        if self._working_directory:
            add_node(node, "working-directory", self._working_directory)
        add_mapping(node, "env", self._env, sequence_style)
        if self._continue_on_error is not None:
            add_node(node, "continue-on-error", self._continue_on_error)
        if self._timeout_minutes is not None:
            add_node(node, "timeout-minutes", self._timeout_minutes)
        parent.value.append(node)
