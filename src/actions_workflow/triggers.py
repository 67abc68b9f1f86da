"""Trigger builders for the ``on`` section.

``On`` is created together with its workflow and collects one builder per
event, in the order events were first requested. Requesting an event again
returns the builder already registered for it:

    workflow.on.push().branches("main").paths_ignore("docs/**")
    workflow.on.pull_request().types("opened", "synchronize")
    workflow.on.schedule("0 4 * * 1")
    workflow.on.workflow_dispatch().input(
        "environment", "Deploy target", required=True,
        type=InputType.CHOICE, options=("staging", "production"),
    )

Every event builder keeps ``on`` and ``workflow`` back-references so a chain
can continue on the parent after configuring an event.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Self, TypeVar

from yaml.nodes import MappingNode

from actions_workflow.exceptions import DuplicateKeyError, InvalidWorkflowError
from actions_workflow.nodes import add_node, add_sequence, mapping_node
from actions_workflow.types import ScalarValue, SequenceStyle

if TYPE_CHECKING:
    from actions_workflow.workflow import Workflow

__all__ = [
    "Event",
    "InputType",
    "On",
    "PullRequest",
    "Push",
    "Schedule",
    "Trigger",
    "WorkflowCall",
    "WorkflowDispatch",
    "WorkflowInput",
    "WorkflowOutput",
    "WorkflowRun",
    "WorkflowSecret",
]

TriggerT = TypeVar("TriggerT", bound="Trigger")


class InputType(str, Enum):
    """Value type of a ``workflow_dispatch`` / ``workflow_call`` input."""

    STRING = "string"
    BOOLEAN = "boolean"
    CHOICE = "choice"
    NUMBER = "number"
    ENVIRONMENT = "environment"


@dataclass(frozen=True)
class WorkflowInput:
    """Input accepted by a manually dispatched or called workflow.

    Attributes:
        name: Input identifier.
        description: Text shown to the caller.
        required: Whether the caller must supply a value.
        default: Value used when the caller supplies none.
        type: Input value type.
        options: Allowed values for CHOICE inputs.
    """

    name: str
    description: str
    required: bool = False
    default: ScalarValue | None = None
    type: InputType = InputType.STRING
    options: tuple[str, ...] = ()

    def build(self, parent: MappingNode, sequence_style: SequenceStyle) -> None:
        node = mapping_node()
        add_node(node, "description", self.description)
        add_node(node, "required", self.required)
        if self.default is not None:
            add_node(node, "default", self.default)
        add_node(node, "type", self.type.value)
        add_sequence(node, "options", self.options, sequence_style)
        add_node(parent, self.name, node)


@dataclass(frozen=True)
class WorkflowSecret:
    name: str
    description: str | None = None
    required: bool = False

    def build(self, parent: MappingNode) -> None:
        node = mapping_node()
        if self.description:
            add_node(node, "description", self.description)
        if self.required:
            add_node(node, "required", True)
        add_node(parent, self.name, node)


@dataclass(frozen=True)
class WorkflowOutput:
    name: str
    description: str
    value: str

    def build(self, parent: MappingNode) -> None:
        node = mapping_node()
        add_node(node, "description", self.description)
        add_node(node, "value", self.value)
        add_node(parent, self.name, node)


class Trigger:
    """Base class for the builder of one event under ``on``.

    Subclasses add their settings to the event mapping in ``_build_body``;
    an event with no settings renders as a bare ``event:`` key.
    """

    def __init__(self, event_name: str, on: On) -> None:
        self.event_name = event_name
        self.on = on

    @property
    def workflow(self) -> Workflow:
        return self.on.workflow

    def build(self, parent: MappingNode, sequence_style: SequenceStyle) -> None:
        node = mapping_node()
        self._build_body(node, sequence_style)
        add_node(parent, self.event_name, node)

    def _build_body(self, node: MappingNode, sequence_style: SequenceStyle) -> None:
        pass


class Event(Trigger):
    """Any event without dedicated settings, optionally filtered by type.

    Example:
        workflow.on.event("release").types("published")
    """

    def __init__(self, event_name: str, on: On) -> None:
        super().__init__(event_name, on)
        self._types: list[str] = []

    def types(self, *types: str) -> Event:
        self._types.extend(types)
        return self

    def _build_body(self, node: MappingNode, sequence_style: SequenceStyle) -> None:
        add_sequence(node, "types", self._types, sequence_style)


class _FilteredTrigger(Trigger):
    """Event filtered by branch and path patterns."""

    def __init__(self, event_name: str, on: On) -> None:
        super().__init__(event_name, on)
        self._branches: list[str] = []
        self._branches_ignore: list[str] = []
        self._paths: list[str] = []
        self._paths_ignore: list[str] = []

    def branches(self, *patterns: str) -> Self:
        self._branches.extend(patterns)
        return self

    def branches_ignore(self, *patterns: str) -> Self:
        self._branches_ignore.extend(patterns)
        return self

    def paths(self, *patterns: str) -> Self:
        self._paths.extend(patterns)
        return self

    def paths_ignore(self, *patterns: str) -> Self:
        self._paths_ignore.extend(patterns)
        return self

    def _build_branch_filters(
        self, node: MappingNode, sequence_style: SequenceStyle
    ) -> None:
        add_sequence(node, "branches", self._branches, sequence_style)
        add_sequence(node, "branches-ignore", self._branches_ignore, sequence_style)

    def _build_path_filters(
        self, node: MappingNode, sequence_style: SequenceStyle
    ) -> None:
        add_sequence(node, "paths", self._paths, sequence_style)
        add_sequence(node, "paths-ignore", self._paths_ignore, sequence_style)


class Push(_FilteredTrigger):
    def __init__(self, on: On) -> None:
        super().__init__("push", on)
        self._tags: list[str] = []
        self._tags_ignore: list[str] = []

    def tags(self, *patterns: str) -> Push:
        self._tags.extend(patterns)
        return self

    def tags_ignore(self, *patterns: str) -> Push:
        self._tags_ignore.extend(patterns)
        return self

    def _build_body(self, node: MappingNode, sequence_style: SequenceStyle) -> None:
        self._build_branch_filters(node, sequence_style)
        add_sequence(node, "tags", self._tags, sequence_style)
        add_sequence(node, "tags-ignore", self._tags_ignore, sequence_style)
        self._build_path_filters(node, sequence_style)


class PullRequest(_FilteredTrigger):
    """Settings shared by ``pull_request`` and ``pull_request_target``."""

    def __init__(self, on: On, event_name: str = "pull_request") -> None:
        super().__init__(event_name, on)
        self._types: list[str] = []

    def types(self, *types: str) -> PullRequest:
        self._types.extend(types)
        return self

    def _build_body(self, node: MappingNode, sequence_style: SequenceStyle) -> None:
        add_sequence(node, "types", self._types, sequence_style)
        self._build_branch_filters(node, sequence_style)
        self._build_path_filters(node, sequence_style)


class Schedule(Trigger):
    """Cron schedules; rendered as a sequence of ``cron`` mappings."""

    def __init__(self, on: On) -> None:
        super().__init__("schedule", on)
        self._crons: list[str] = []

    def cron(self, *expressions: str) -> Schedule:
        self._crons.extend(expressions)
        return self

    def build(self, parent: MappingNode, sequence_style: SequenceStyle) -> None:
        add_sequence(
            parent,
            self.event_name,
            [{"cron": expression} for expression in self._crons],
            sequence_style,
        )


class _InputsMixin:
    """Keyed input registry shared by dispatch and call triggers."""

    _inputs: dict[str, WorkflowInput]

    def _register_input(self, workflow_input: WorkflowInput) -> None:
        if workflow_input.name in self._inputs:
            raise DuplicateKeyError("input", workflow_input.name)
        self._inputs[workflow_input.name] = workflow_input

    def _build_inputs(self, node: MappingNode, sequence_style: SequenceStyle) -> None:
        if not self._inputs:
            return
        inputs_node = mapping_node()
        for workflow_input in self._inputs.values():
            workflow_input.build(inputs_node, sequence_style)
        add_node(node, "inputs", inputs_node)


class WorkflowDispatch(_InputsMixin, Trigger):
    def __init__(self, on: On) -> None:
        super().__init__("workflow_dispatch", on)
        self._inputs = {}

    def input(
        self,
        name: str,
        description: str,
        *,
        required: bool = False,
        default: ScalarValue | None = None,
        type: InputType = InputType.STRING,
        options: tuple[str, ...] = (),
    ) -> WorkflowDispatch:
        """Declare an input the user fills in when dispatching the workflow.

        Raises:
            DuplicateKeyError: If an input named ``name`` already exists.
        """
        self._register_input(
            WorkflowInput(name, description, required, default, type, tuple(options))
        )
        return self

    def _build_body(self, node: MappingNode, sequence_style: SequenceStyle) -> None:
        self._build_inputs(node, sequence_style)


class WorkflowCall(_InputsMixin, Trigger):
    """Makes the workflow reusable from other workflows.

    Inputs, secrets and outputs are rendered in that order.
    """

    def __init__(self, on: On) -> None:
        super().__init__("workflow_call", on)
        self._inputs = {}
        self._secrets: dict[str, WorkflowSecret] = {}
        self._outputs: dict[str, WorkflowOutput] = {}

    def input(
        self,
        name: str,
        description: str,
        *,
        required: bool = False,
        default: ScalarValue | None = None,
        type: InputType = InputType.STRING,
    ) -> WorkflowCall:
        self._register_input(WorkflowInput(name, description, required, default, type))
        return self

    def secret(
        self, name: str, description: str | None = None, required: bool = False
    ) -> WorkflowCall:
        if name in self._secrets:
            raise DuplicateKeyError("secret", name)
        self._secrets[name] = WorkflowSecret(name, description, required)
        return self

    def output(self, name: str, description: str, value: str) -> WorkflowCall:
        if name in self._outputs:
            raise DuplicateKeyError("output", name)
        self._outputs[name] = WorkflowOutput(name, description, value)
        return self

    def _build_body(self, node: MappingNode, sequence_style: SequenceStyle) -> None:
        self._build_inputs(node, sequence_style)
        if self._secrets:
            secrets_node = mapping_node()
            for secret in self._secrets.values():
                secret.build(secrets_node)
            add_node(node, "secrets", secrets_node)
        if self._outputs:
            outputs_node = mapping_node()
            for output in self._outputs.values():
                output.build(outputs_node)
            add_node(node, "outputs", outputs_node)


class WorkflowRun(Trigger):
    """Runs after other workflows are requested or complete."""

    def __init__(self, on: On) -> None:
        super().__init__("workflow_run", on)
        self._workflows: list[str] = []
        self._types: list[str] = []
        self._branches: list[str] = []
        self._branches_ignore: list[str] = []

    def workflows(self, *names: str) -> WorkflowRun:
        self._workflows.extend(names)
        return self

    def types(self, *types: str) -> WorkflowRun:
        self._types.extend(types)
        return self

    def branches(self, *patterns: str) -> WorkflowRun:
        self._branches.extend(patterns)
        return self

    def branches_ignore(self, *patterns: str) -> WorkflowRun:
        self._branches_ignore.extend(patterns)
        return self

    def _build_body(self, node: MappingNode, sequence_style: SequenceStyle) -> None:
        add_sequence(node, "workflows", self._workflows, sequence_style)
        add_sequence(node, "types", self._types, sequence_style)
        add_sequence(node, "branches", self._branches, sequence_style)
        add_sequence(node, "branches-ignore", self._branches_ignore, sequence_style)


class On:
    """Trigger builder rendered as the workflow's ``on`` section.

    Attributes:
        workflow: The owning workflow.
    """

    def __init__(self, workflow: Workflow) -> None:
        self.workflow = workflow
        self._triggers: dict[str, Trigger] = {}

    def push(self) -> Push:
        return self._trigger("push", Push)

    def pull_request(self) -> PullRequest:
        return self._trigger("pull_request", PullRequest)

    def pull_request_target(self) -> PullRequest:
        return self._trigger(
            "pull_request_target",
            PullRequest,
            lambda on: PullRequest(on, event_name="pull_request_target"),
        )

    def schedule(self, *crons: str) -> Schedule:
        """Add cron schedules; repeated calls accumulate expressions."""
        return self._trigger("schedule", Schedule).cron(*crons)

    def workflow_dispatch(self) -> WorkflowDispatch:
        return self._trigger("workflow_dispatch", WorkflowDispatch)

    def workflow_call(self) -> WorkflowCall:
        return self._trigger("workflow_call", WorkflowCall)

    def workflow_run(self) -> WorkflowRun:
        return self._trigger("workflow_run", WorkflowRun)

    def event(self, event_name: str) -> Event:
        """Add an event without dedicated settings (e.g. ``release``)."""
        if not event_name or not event_name.strip():
            raise InvalidWorkflowError(
                "Event name must not be blank", workflow_name=self.workflow.name
            )
        return self._trigger(event_name, Event, lambda on: Event(event_name, on))

    def _trigger(
        self,
        event_name: str,
        trigger_type: type[TriggerT],
        factory: Callable[[On], TriggerT] | None = None,
    ) -> TriggerT:
        existing = self._triggers.get(event_name)
        if existing is not None:
            if not isinstance(existing, trigger_type):
                raise InvalidWorkflowError(
                    f"Event '{event_name}' is already configured as "
                    f"{type(existing).__name__}",
                    workflow_name=self.workflow.name,
                )
            return existing
        trigger = (factory or trigger_type)(self)
        self._triggers[event_name] = trigger
        return trigger

    def build(self, parent: MappingNode, sequence_style: SequenceStyle) -> None:
        """Append the ``on`` section to ``parent``.

        The section is always present; without events it is an empty mapping,
        rendered as a bare ``on:``.
        """
        node = mapping_node()
        for trigger in self._triggers.values():
            trigger.build(node, sequence_style)
        add_node(parent, "on", node)
