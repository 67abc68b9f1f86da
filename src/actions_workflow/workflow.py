"""Workflow aggregate and document assembler.

``Workflow`` is the root builder of a GitHub Actions workflow document. All
configuration methods return the workflow itself (or, for ``job()``, the new
job builder) so calls can be chained:

    workflow = Workflow("CI")
    workflow.on.push().branches("main")
    workflow.permissions(contents=Permission.READ).concurrency(
        "ci-${{ github.ref }}", cancel_in_progress=True
    )
    workflow.job("test").runs_on(UBUNTU_LATEST).step().run("pytest")

    text = workflow.to_yaml()

Top-level sections are always assembled in the same order: ``name``, ``on``,
``permissions``, ``concurrency``, ``env``, ``defaults``, ``jobs``. Every
section after ``on`` is omitted when it has nothing to say.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from yaml.nodes import MappingNode

from actions_workflow.config import WorkflowSettings, load_settings
from actions_workflow.emitter import finish_document
from actions_workflow.exceptions import DuplicateKeyError, InvalidWorkflowError
from actions_workflow.jobs import Job
from actions_workflow.logging import get_logger
from actions_workflow.nodes import (
    add_concurrency,
    add_mapping,
    add_node,
    mapping_node,
)
from actions_workflow.permissions import (
    Permission,
    PermissionConfig,
    build_permissions_node,
)
from actions_workflow.triggers import On
from actions_workflow.types import SequenceStyle

__all__ = ["Workflow"]

logger = get_logger(__name__)


class Workflow:
    """Root builder for one workflow document.

    Attributes:
        on: Trigger builder, created with the workflow.
    """

    def __init__(self, name: str) -> None:
        """Create a workflow.

        Args:
            name: Workflow display name.

        Raises:
            InvalidWorkflowError: If ``name`` is blank.
        """
        if not name or not name.strip():
            raise InvalidWorkflowError("Workflow name must not be blank")

        self._name = name
        self._permissions = PermissionConfig.not_specified()
        self._concurrency_group: str | None = None
        self._concurrency_cancel_in_progress = False
        self._env: dict[str, str] = {}
        self._defaults: dict[str, str] = {}
        self._defaults_run_shell: str | None = None
        self._defaults_run_working_directory: str | None = None
        self._jobs: dict[str, Job] = {}
        self.on = On(self)

    @property
    def name(self) -> str:
        return self._name

    @property
    def permission_config(self) -> PermissionConfig:
        """Current permission state."""
        return self._permissions

    @property
    def jobs(self) -> Mapping[str, Job]:
        """Registered jobs in insertion order (read-only view)."""
        return MappingProxyType(self._jobs)

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
    ) -> Workflow:
        """Grant per-scope permissions.

        Replaces any earlier permission configuration, including a previous
        ``permissions_read_all()`` / ``permissions_write_all()``. Scopes not
        named here are rendered as ``none``.

        Returns:
            This workflow.
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
        logger.debug("permissions_changed", workflow=self._name, mode="custom")
        return self

    def permissions_read_all(self) -> Workflow:
        self._permissions = PermissionConfig.read_all()
        logger.debug("permissions_changed", workflow=self._name, mode="read-all")
        return self

    def permissions_write_all(self) -> Workflow:
        self._permissions = PermissionConfig.write_all()
        logger.debug("permissions_changed", workflow=self._name, mode="write-all")
        return self

    def concurrency(self, group: str, cancel_in_progress: bool = False) -> Workflow:
        """Limit the workflow to one active run per concurrency group.

        Args:
            group: Concurrency group name; expressions are allowed. A blank
                group disables the section.
            cancel_in_progress: Cancel the running workflow in the group.

        Returns:
            This workflow.
        """
        self._concurrency_group = group
        self._concurrency_cancel_in_progress = cancel_in_progress
        return self

    def env(self, environment: Mapping[str, str]) -> Workflow:
        """Replace the workflow-level environment variables."""
        self._env = dict(environment)
        return self

    def defaults(self, defaults: Mapping[str, str]) -> Workflow:
        """Replace the entries of the ``defaults`` section."""
        self._defaults = dict(defaults)
        return self

    def defaults_run(self, shell: str, working_directory: str) -> Workflow:
        """Set the default shell and working directory for ``run`` steps."""
        self._defaults_run_shell = shell
        self._defaults_run_working_directory = working_directory
        return self

    def job(self, job_id: str) -> Job:
        """Create and register a job.

        Args:
            job_id: Unique job identifier, used as the key under ``jobs``.

        Returns:
            The new job builder.

        Raises:
            DuplicateKeyError: If a job with ``job_id`` already exists. The
                existing job is left untouched.
        """
        if job_id in self._jobs:
            raise DuplicateKeyError("job", job_id, workflow_name=self._name)
        job = Job(job_id, self)
        self._jobs[job_id] = job
        logger.debug("job_registered", workflow=self._name, job_id=job_id)
        return job

    def build_document(
        self, sequence_style: SequenceStyle = SequenceStyle.BLOCK
    ) -> MappingNode:
        """Assemble the document node tree.

        Args:
            sequence_style: Rendering style passed to every collaborator for
                list-valued nodes.

        Returns:
            Root mapping node of the document.
        """
        root = mapping_node()
        add_node(root, "name", self._name)

        self.on.build(root, sequence_style)

        build_permissions_node(root, self._permissions)

        add_concurrency(
            root, self._concurrency_group, self._concurrency_cancel_in_progress
        )

        add_mapping(root, "env", self._env)

        self._build_defaults(root)

        if self._jobs:
            jobs_node = mapping_node()
            for job in self._jobs.values():
                job.build(jobs_node, sequence_style)
            add_node(root, "jobs", jobs_node)

        return root

    def _build_defaults(self, root: MappingNode) -> None:
        has_run_shell = bool(
            self._defaults_run_shell and self._defaults_run_shell.strip()
        )
        if not self._defaults and not has_run_shell:
            return

        defaults_node = mapping_node()
        for key, value in self._defaults.items():
            add_node(defaults_node, key, value)

        if has_run_shell:
            run_node = mapping_node()
            add_node(run_node, "shell", self._defaults_run_shell)
            add_node(
                run_node,
                "working-directory",
                self._defaults_run_working_directory or "",
            )
            add_node(defaults_node, "run", run_node)

        add_node(root, "defaults", defaults_node)

    def to_yaml(
        self,
        sequence_style: SequenceStyle = SequenceStyle.BLOCK,
        *,
        settings: WorkflowSettings | None = None,
    ) -> str:
        """Render the workflow document.

        Rendering reads the builder state only; calling it repeatedly on an
        unchanged workflow returns identical text.

        Args:
            sequence_style: BLOCK (default) or FLOW rendering for lists.
            settings: Rendering settings. Loaded from the
                ``ACTIONS_WORKFLOW_*`` environment variables on every call
                when omitted.

        Returns:
            Workflow document text, starting with the generated-file header.

        Raises:
            ConfigError: If ``settings`` is omitted and the environment holds
                an invalid value. Passing ``settings`` explicitly never raises.
        """
        if settings is None:
            settings = load_settings()
        text = finish_document(self.build_document(sequence_style), settings)
        logger.debug(
            "workflow_rendered",
            workflow=self._name,
            jobs=len(self._jobs),
            sequence_style=sequence_style.value,
        )
        return text
