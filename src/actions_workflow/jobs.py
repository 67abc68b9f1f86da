"""Job builder for the workflow's ``jobs`` section.

Jobs are created through ``Workflow.job(job_id)``, which registers them in
order. Each job renders itself under its id:

    build = workflow.job("build").name("Build").runs_on(UBUNTU_LATEST)
    build.strategy().matrix({"python-version": ["3.11", "3.12"]})
    build.step().uses("actions/checkout@v4")
    build.step("tests").name("Test").run("pytest -x")

Keys render in a fixed order: ``name``, ``permissions``, ``needs``, ``if``,
``runs-on``, ``environment``, ``concurrency``, ``outputs``, ``env``,
``defaults``, ``strategy``, ``timeout-minutes``, ``continue-on-error``,
``uses``, ``with``, ``secrets``, ``steps``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from yaml.nodes import MappingNode, SequenceNode

from actions_workflow.exceptions import DuplicateKeyError, InvalidWorkflowError
from actions_workflow.logging import get_logger
from actions_workflow.nodes import (
    SEQ_TAG,
    add_concurrency,
    add_mapping,
    add_node,
    add_sequence,
    mapping_node,
    sequence_node,
)
from actions_workflow.permissions import (
    Permission,
    PermissionConfig,
    build_permissions_node,
)
from actions_workflow.steps import Step
from actions_workflow.types import ScalarMapping, ScalarValue, SequenceStyle

if TYPE_CHECKING:
    from actions_workflow.workflow import Workflow

__all__ = ["Job", "Strategy"]

logger = get_logger(__name__)


class Strategy:
    """Matrix strategy of a job.

    Example:
        job.strategy().matrix({"os": ["ubuntu-latest", "windows-latest"]}).include(
            {"os": "ubuntu-latest", "experimental": True}
        ).fail_fast(False)
    """

    def __init__(self, job: Job) -> None:
        self.job = job
        self._matrix: dict[str, list[ScalarValue]] = {}
        self._include: list[dict[str, ScalarValue]] = []
        self._exclude: list[dict[str, ScalarValue]] = []
        self._fail_fast: bool | None = None
        self._max_parallel: int | None = None

    def matrix(
        self,
        axes: Mapping[str, Sequence[ScalarValue]] | None = None,
        /,
        **more_axes: Sequence[ScalarValue],
    ) -> Strategy:
        """Add matrix axes.

        Axis names that are not valid Python identifiers (``python-version``)
        go in ``axes``; others may be passed as keywords. Re-adding an axis
        replaces its values.
        """
        for name, values in {**(axes or {}), **more_axes}.items():
            self._matrix[name] = list(values)
        return self

    def include(self, *entries: ScalarMapping) -> Strategy:
        self._include.extend(dict(entry) for entry in entries)
        return self

    def exclude(self, *entries: ScalarMapping) -> Strategy:
        self._exclude.extend(dict(entry) for entry in entries)
        return self

    def fail_fast(self, enabled: bool = True) -> Strategy:
        self._fail_fast = enabled
        return self

    def max_parallel(self, limit: int) -> Strategy:
        if limit <= 0:
            raise InvalidWorkflowError(
                f"max-parallel must be positive, got {limit}",
                workflow_name=self.job.workflow.name,
            )
        self._max_parallel = limit
        return self

    def build(self, parent: MappingNode, sequence_style: SequenceStyle) -> None:
        node = mapping_node()
        if self._matrix or self._include or self._exclude:
            matrix_node = mapping_node()
            for name, values in self._matrix.items():
                add_node(matrix_node, name, sequence_node(values, sequence_style))
            add_sequence(matrix_node, "include", self._include, sequence_style)
            add_sequence(matrix_node, "exclude", self._exclude, sequence_style)
            add_node(node, "matrix", matrix_node)
        if self._fail_fast is not None:
            add_node(node, "fail-fast", self._fail_fast)
        if self._max_parallel is not None:
            add_node(node, "max-parallel", self._max_parallel)
        add_node(parent, "strategy", node)


class Job:
    """Builder for one job, keyed by its id under ``jobs``.

    Attributes:
        job_id: Identifier used as the job's key.
        workflow: The owning workflow.
    """

    def __init__(self, job_id: str, workflow: Workflow) -> None:
        if not job_id or not job_id.strip():
            raise InvalidWorkflowError(
                "Job id must not be blank", workflow_name=workflow.name
            )
        self.job_id = job_id
        self.workflow = workflow
        self._name: str | None = None
        self._permissions = PermissionConfig.not_specified()
        self._needs: list[str] = []
        self._if: str | None = None
        self._runs_on: list[str] = []
        self._environment: str | None = None
        self._environment_url: str | None = None
        self._concurrency_group: str | None = None
        self._concurrency_cancel_in_progress = False
        self._outputs: dict[str, str] = {}
        self._env: dict[str, str] = {}
        self._defaults_run_shell: str | None = None
        self._defaults_run_working_directory: str | None = None
        self._strategy: Strategy | None = None
        self._timeout_minutes: int | None = None
        self._continue_on_error: bool | None = None
        self._uses: str | None = None
        self._with: dict[str, ScalarValue] = {}
        self._secrets: dict[str, str] = {}
        self._secrets_inherit = False
        self._steps: list[Step] = []

    def name(self, name: str) -> Job:
        self._name = name
        return self

    def permissions(
        self,
        *,
        actions: Permission = Permission.NONE,
        checks: Permission = Permission.NONE,
        contents: Permission = Permission.NONE,
        deployments: Permission = Permission.NONE,
        discussions: Permission = Permission.NONE,
        id_token: Permission = Permission.NONE,
        issues: Permission = Permission.NONE,
        packages: Permission = Permission.NONE,
        pages: Permission = Permission.NONE,
        pull_requests: Permission = Permission.NONE,
        repository_projects: Permission = Permission.NONE,
        security_events: Permission = Permission.NONE,
        statuses: Permission = Permission.NONE,
    ) -> Job:
        """Grant per-scope permissions to this job's token.

        Same semantics as ``Workflow.permissions``: the call replaces any
        earlier permission configuration of the job.
        """
        self._permissions = PermissionConfig.from_levels(
            actions=actions,
            checks=checks,
            contents=contents,
            deployments=deployments,
            discussions=discussions,
            id_token=id_token,
            issues=issues,
            packages=packages,
            pages=pages,
            pull_requests=pull_requests,
            repository_projects=repository_projects,
            security_events=security_events,
            statuses=statuses,
        )
        return self

    def permissions_read_all(self) -> Job:
        self._permissions = PermissionConfig.read_all()
        return self

    def permissions_write_all(self) -> Job:
        self._permissions = PermissionConfig.write_all()
        return self

    def needs(self, *job_ids: str) -> Job:
        self._needs.extend(job_ids)
        return self

    def if_(self, condition: str) -> Job:
        """Run the job only when ``condition`` holds (the ``if`` key)."""
        self._if = condition
        return self

    def runs_on(self, *labels: str) -> Job:
        """Select the runner; several labels must all match the runner."""
        if not labels:
            raise InvalidWorkflowError(
                f"Job '{self.job_id}' needs at least one runner label",
                workflow_name=self.workflow.name,
            )
        self._runs_on = list(labels)
        return self

    def environment(self, name: str, url: str | None = None) -> Job:
        self._environment = name
        self._environment_url = url
        return self

    def concurrency(self, group: str, cancel_in_progress: bool = False) -> Job:
        self._concurrency_group = group
        self._concurrency_cancel_in_progress = cancel_in_progress
        return self

    def outputs(self, outputs: Mapping[str, str]) -> Job:
        self._outputs = dict(outputs)
        return self

    def env(self, environment: Mapping[str, str]) -> Job:
        self._env = dict(environment)
        return self

    def defaults_run(self, shell: str, working_directory: str | None = None) -> Job:
        self._defaults_run_shell = shell
        self._defaults_run_working_directory = working_directory
        return self

    def strategy(self) -> Strategy:
        """Return the job's strategy builder, creating it on first use."""
        if self._strategy is None:
            self._strategy = Strategy(self)
        return self._strategy

    def timeout_minutes(self, minutes: int) -> Job:
        if minutes <= 0:
            raise InvalidWorkflowError(
                f"Job timeout must be positive, got {minutes}",
                workflow_name=self.workflow.name,
            )
        self._timeout_minutes = minutes
        return self

    def continue_on_error(self, enabled: bool = True) -> Job:
        self._continue_on_error = enabled
        return self

    def uses(self, workflow_ref: str) -> Job:
        """Call a reusable workflow instead of running steps."""
        self._uses = workflow_ref
        return self

    def with_(self, inputs: Mapping[str, ScalarValue]) -> Job:
        self._with = dict(inputs)
        return self

    def secrets(self, secrets: Mapping[str, str]) -> Job:
        self._secrets = dict(secrets)
        self._secrets_inherit = False
        return self

    def secrets_inherit(self) -> Job:
        """Pass all of the caller's secrets to the reusable workflow."""
        self._secrets = {}
        self._secrets_inherit = True
        return self

    def step(self, step_id: str | None = None) -> Step:
        """Append a new step.

        Args:
            step_id: Optional id, referenced by ``steps.<id>`` expressions.

        Returns:
            The new step builder.

        Raises:
            DuplicateKeyError: If another step of this job has ``step_id``.
        """
        if step_id and any(step.step_id == step_id for step in self._steps):
            raise DuplicateKeyError("step", step_id, workflow_name=self.workflow.name)
        step = Step(self, step_id)
        self._steps.append(step)
        logger.debug(
            "step_registered",
            workflow=self.workflow.name,
            job_id=self.job_id,
            step_id=step_id,
            position=len(self._steps),
        )
        return step

    def build(self, parent: MappingNode, sequence_style: SequenceStyle) -> None:
        """Append ``<job_id>: {...}`` to the ``jobs`` mapping."""
        node = mapping_node()
        if self._name:
            add_node(node, "name", self._name)
        build_permissions_node(node, self._permissions)
        self._add_one_or_many(node, "needs", self._needs, sequence_style)
        if self._if:
            add_node(node, "if", self._if)
        self._add_one_or_many(node, "runs-on", self._runs_on, sequence_style)
        self._build_environment(node)
        add_concurrency(
            node, self._concurrency_group, self._concurrency_cancel_in_progress
        )
        add_mapping(node, "outputs", self._outputs)
        add_mapping(node, "env", self._env)
        if self._defaults_run_shell:
            run_node = mapping_node()
            add_node(run_node, "shell", self._defaults_run_shell)
            if self._defaults_run_working_directory:
                add_node(
                    run_node, "working-directory", self._defaults_run_working_directory
                )
            defaults_node = mapping_node()
            add_node(defaults_node, "run", run_node)
            add_node(node, "defaults", defaults_node)
        if self._strategy is not None:
            self._strategy.build(node, sequence_style)
        if self._timeout_minutes is not None:
            add_node(node, "timeout-minutes", self._timeout_minutes)
        if self._continue_on_error is not None:
            add_node(node, "continue-on-error", self._continue_on_error)
        if self._uses:
            add_node(node, "uses", self._uses)
        add_mapping(node, "with", self._with, sequence_style)
        if self._secrets_inherit:
            add_node(node, "secrets", "inherit")
        else:
            add_mapping(node, "secrets", self._secrets)
        if self._steps:
            steps_node = SequenceNode(SEQ_TAG, [], flow_style=False)
            for step in self._steps:
                step.build(steps_node, sequence_style)
            add_node(node, "steps", steps_node)
        add_node(parent, self.job_id, node)

    @staticmethod
    def _add_one_or_many(
        node: MappingNode,
        key: str,
        values: list[str],
        sequence_style: SequenceStyle,
    ) -> None:
        if len(values) == 1:
            add_node(node, key, values[0])
        else:
            add_sequence(node, key, values, sequence_style)

    def _build_environment(self, node: MappingNode) -> None:
        if not self._environment:
            return
        if self._environment_url:
            environment_node = mapping_node()
            add_node(environment_node, "name", self._environment)
            add_node(environment_node, "url", self._environment_url)
            add_node(node, "environment", environment_node)
        else:
            add_node(node, "environment", self._environment)
