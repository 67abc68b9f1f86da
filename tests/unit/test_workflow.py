"""Unit tests for the Workflow aggregate and document assembly.

Test scenarios:
1. Minimal workflow renders header, name and an empty ``on`` section
2. Permission modes and last-writer-wins switching
3. Concurrency, env and defaults sections
4. Job registration and duplicate ids
5. Fixed top-level section order
6. Idempotent rendering
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from actions_workflow.config import WorkflowSettings
from actions_workflow.emitter import DOCUMENT_END_MARKER, HEADER
from actions_workflow.exceptions import (
    ConfigError,
    DuplicateKeyError,
    InvalidWorkflowError,
    WorkflowError,
)
from actions_workflow.jobs import Job
from actions_workflow.permissions import Permission, PermissionMode, PermissionScope
from actions_workflow.types import SequenceStyle
from actions_workflow.workflow import Workflow

PREAMBLE = f"{HEADER}\n\n"

CUSTOM_CONTENTS_WRITE_PR_READ = """\
permissions:
  actions: none
  checks: none
  contents: write
  deployments: none
  discussions: none
  id-token: none
  issues: none
  packages: none
  pages: none
  pull-requests: read
  repository-projects: none
  security-events: none
  statuses: none
"""


def _top_level_keys(text: str) -> list[str]:
    return [
        line.split(":", 1)[0]
        for line in text.splitlines()
        if line and not line.startswith((" ", "#", "-"))
    ]


# =============================================================================
# Construction
# =============================================================================


class TestWorkflowConstruction:
    def test_name_is_kept(self) -> None:
        assert Workflow("CI").name == "CI"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_is_rejected(self, name: str) -> None:
        with pytest.raises(InvalidWorkflowError) as exc_info:
            Workflow(name)

        assert isinstance(exc_info.value, WorkflowError)

    def test_trigger_collaborator_is_created(self, workflow: Workflow) -> None:
        assert workflow.on.workflow is workflow

    def test_workflows_do_not_share_collaborators(self) -> None:
        first = Workflow("one")
        second = Workflow("two")

        first.on.push()

        assert first.on is not second.on
        assert "push" not in second.to_yaml()


class TestMinimalWorkflow:
    def test_name_only(self, workflow: Workflow, settings: WorkflowSettings) -> None:
        """Test a bare workflow renders header, name and an empty on key."""
        assert workflow.to_yaml(settings=settings) == PREAMBLE + "name: CI\non:\n"

    def test_settings_loaded_from_environment_when_omitted(
        self, workflow: Workflow, clean_env: None
    ) -> None:
        assert workflow.to_yaml() == PREAMBLE + "name: CI\non:\n"

    def test_invalid_environment_settings_raise_config_error(
        self, workflow: Workflow, clean_env: None
    ) -> None:
        with patch.dict(os.environ, {"ACTIONS_WORKFLOW_INDENT": "1"}):
            with pytest.raises(ConfigError) as exc_info:
                workflow.to_yaml()

        assert exc_info.value.field == "indent"

    def test_explicit_settings_skip_the_environment(
        self, workflow: Workflow, settings: WorkflowSettings, clean_env: None
    ) -> None:
        with patch.dict(os.environ, {"ACTIONS_WORKFLOW_INDENT": "1"}):
            text = workflow.to_yaml(settings=settings)

        assert text == PREAMBLE + "name: CI\non:\n"


# =============================================================================
# Permissions
# =============================================================================


class TestWorkflowPermissions:
    def test_not_specified_omits_section(
        self, workflow: Workflow, settings: WorkflowSettings
    ) -> None:
        assert "permissions" not in workflow.to_yaml(settings=settings)

    def test_read_all(self, workflow: Workflow, settings: WorkflowSettings) -> None:
        text = workflow.permissions_read_all().to_yaml(settings=settings)

        assert text == PREAMBLE + "name: CI\non:\npermissions: read-all\n"

    def test_write_all(self, workflow: Workflow, settings: WorkflowSettings) -> None:
        text = workflow.permissions_write_all().to_yaml(settings=settings)

        assert text == PREAMBLE + "name: CI\non:\npermissions: write-all\n"

    def test_custom_lists_every_scope(
        self, workflow: Workflow, settings: WorkflowSettings
    ) -> None:
        workflow.permissions(contents=Permission.WRITE, pull_requests=Permission.READ)

        text = workflow.to_yaml(settings=settings)

        assert text == PREAMBLE + "name: CI\non:\n" + CUSTOM_CONTENTS_WRITE_PR_READ

    def test_scopes_after_read_all_switch_to_custom(self, workflow: Workflow) -> None:
        workflow.permissions_read_all().permissions(issues=Permission.WRITE)

        assert workflow.permission_config.mode is PermissionMode.CUSTOM
        assert "read-all" not in workflow.to_yaml()

    def test_read_all_after_scopes_switches_back(self, workflow: Workflow) -> None:
        workflow.permissions(issues=Permission.WRITE).permissions_write_all()

        assert workflow.permission_config.mode is PermissionMode.WRITE_ALL
        assert "permissions: write-all\n" in workflow.to_yaml()

    def test_each_scope_call_replaces_previous_scopes(self, workflow: Workflow) -> None:
        workflow.permissions(contents=Permission.WRITE)
        workflow.permissions(issues=Permission.READ)

        scopes = workflow.permission_config.scopes
        assert scopes[PermissionScope.CONTENTS] is Permission.NONE
        assert scopes[PermissionScope.ISSUES] is Permission.READ

    def test_unknown_scope_is_a_type_error(self, workflow: Workflow) -> None:
        with pytest.raises(TypeError):
            workflow.permissions(workflows=Permission.WRITE)  # type: ignore[call-arg]


# =============================================================================
# Concurrency, env and defaults
# =============================================================================


class TestWorkflowSections:
    def test_concurrency(self, workflow: Workflow, settings: WorkflowSettings) -> None:
        workflow.concurrency("ci-${{ github.ref }}", cancel_in_progress=True)

        text = workflow.to_yaml(settings=settings)

        assert text.endswith(
            "concurrency:\n"
            "  group: ci-${{ github.ref }}\n"
            "  cancel-in-progress: true\n"
        )

    def test_concurrency_defaults_to_no_cancel(self, workflow: Workflow) -> None:
        text = workflow.concurrency("deploy").to_yaml()

        assert "  cancel-in-progress: false\n" in text

    def test_blank_concurrency_group_omits_section(self, workflow: Workflow) -> None:
        text = workflow.concurrency("  ", cancel_in_progress=True).to_yaml()

        assert "concurrency" not in text

    def test_env_preserves_order(
        self, workflow: Workflow, settings: WorkflowSettings
    ) -> None:
        workflow.env({"ZED": "last", "ALPHA": "first"})

        text = workflow.to_yaml(settings=settings)

        assert text.endswith("env:\n  ZED: last\n  ALPHA: first\n")

    def test_env_is_replaced_not_merged(self, workflow: Workflow) -> None:
        workflow.env({"A": "1"}).env({"B": "2"})

        text = workflow.to_yaml()

        assert "A:" not in text
        assert "  B: '2'\n" in text

    def test_env_is_copied(self, workflow: Workflow) -> None:
        environment = {"A": "a"}
        workflow.env(environment)
        environment["B"] = "b"

        assert "B:" not in workflow.to_yaml()

    def test_empty_env_omits_section(self, workflow: Workflow) -> None:
        assert "env" not in workflow.env({}).to_yaml()

    def test_defaults_map_then_run(
        self, workflow: Workflow, settings: WorkflowSettings
    ) -> None:
        workflow.defaults({"timeout": "10"}).defaults_run("bash", "src")

        text = workflow.to_yaml(settings=settings)

        assert text.endswith(
            "defaults:\n"
            "  timeout: '10'\n"
            "  run:\n"
            "    shell: bash\n"
            "    working-directory: src\n"
        )

    def test_defaults_run_only(self, workflow: Workflow) -> None:
        text = workflow.defaults_run("pwsh", "build").to_yaml()

        assert "defaults:\n  run:\n    shell: pwsh\n" in text

    def test_blank_working_directory_is_written_empty(
        self, workflow: Workflow, settings: WorkflowSettings
    ) -> None:
        text = workflow.defaults_run("bash", "").to_yaml(settings=settings)

        assert text.endswith(
            "defaults:\n  run:\n    shell: bash\n    working-directory: ''\n"
        )

    def test_blank_shell_without_map_omits_defaults(self, workflow: Workflow) -> None:
        assert "defaults" not in workflow.defaults_run(" ", "src").to_yaml()


# =============================================================================
# Jobs
# =============================================================================


class TestWorkflowJobs:
    def test_job_returns_new_job(self, workflow: Workflow) -> None:
        job = workflow.job("build")

        assert isinstance(job, Job)
        assert job.workflow is workflow
        assert list(workflow.jobs) == ["build"]

    def test_duplicate_job_id_fails_fast(self, workflow: Workflow) -> None:
        first = workflow.job("build").runs_on("ubuntu-latest")

        with pytest.raises(DuplicateKeyError) as exc_info:
            workflow.job("build")

        assert exc_info.value.key == "build"
        assert exc_info.value.key_type == "job"
        assert exc_info.value.workflow_name == "CI"
        assert workflow.jobs["build"] is first
        assert "runs-on: ubuntu-latest" in workflow.to_yaml()

    def test_empty_job_renders_bare_key(
        self, workflow: Workflow, settings: WorkflowSettings
    ) -> None:
        workflow.job("noop")

        text = workflow.to_yaml(settings=settings)

        assert text == PREAMBLE + "name: CI\non:\njobs:\n  noop:\n"

    def test_jobs_keep_insertion_order(self, workflow: Workflow) -> None:
        workflow.job("zeta").runs_on("ubuntu-latest")
        workflow.job("alpha").runs_on("ubuntu-latest")

        text = workflow.to_yaml()

        assert text.index("  zeta:") < text.index("  alpha:")

    def test_jobs_view_is_read_only(self, workflow: Workflow) -> None:
        with pytest.raises(TypeError):
            workflow.jobs["x"] = workflow.job("x")  # type: ignore[index]


# =============================================================================
# Whole documents
# =============================================================================


class TestDocumentAssembly:
    def test_full_document(self, settings: WorkflowSettings) -> None:
        """Test every section renders, in the fixed top-level order."""
        workflow = Workflow("CI")
        workflow.on.push().branches("main")
        workflow.permissions(contents=Permission.WRITE, pull_requests=Permission.READ)
        workflow.concurrency("ci", cancel_in_progress=True)
        workflow.env({"PYTHONUNBUFFERED": "1"})
        workflow.defaults_run("bash", "src")
        workflow.job("lint").runs_on("ubuntu-latest").step().run("ruff check .")
        test = workflow.job("test").needs("lint").runs_on("ubuntu-latest")
        test.step().run("pytest")

        text = workflow.to_yaml(settings=settings)

        assert text == (
            PREAMBLE
            + "name: CI\n"
            + "on:\n"
            + "  push:\n"
            + "    branches:\n"
            + "    - main\n"
            + CUSTOM_CONTENTS_WRITE_PR_READ
            + "concurrency:\n"
            + "  group: ci\n"
            + "  cancel-in-progress: true\n"
            + "env:\n"
            + "  PYTHONUNBUFFERED: '1'\n"
            + "defaults:\n"
            + "  run:\n"
            + "    shell: bash\n"
            + "    working-directory: src\n"
            + "jobs:\n"
            + "  lint:\n"
            + "    runs-on: ubuntu-latest\n"
            + "    steps:\n"
            + "    - run: ruff check .\n"
            + "  test:\n"
            + "    needs: lint\n"
            + "    runs-on: ubuntu-latest\n"
            + "    steps:\n"
            + "    - run: pytest\n"
        )

    def test_section_order_ignores_call_order(self) -> None:
        workflow = Workflow("CI")
        workflow.job("build").runs_on("ubuntu-latest")
        workflow.defaults({"key": "value"})
        workflow.env({"A": "b"})
        workflow.concurrency("group")
        workflow.permissions_read_all()
        workflow.on.workflow_dispatch()

        keys = _top_level_keys(workflow.to_yaml())

        assert keys == [
            "name",
            "on",
            "permissions",
            "concurrency",
            "env",
            "defaults",
            "jobs",
        ]

    def test_flow_style_applies_to_sequences_only(
        self, settings: WorkflowSettings
    ) -> None:
        workflow = Workflow("CI")
        workflow.on.push().branches("main", "release/*")
        workflow.job("build").runs_on("ubuntu-latest", "x64")

        text = workflow.to_yaml(SequenceStyle.FLOW, settings=settings)

        assert "  push:\n    branches: [main, release/*]\n" in text
        assert "    runs-on: [ubuntu-latest, x64]\n" in text

    def test_rendering_is_idempotent(self) -> None:
        workflow = Workflow("CI")
        workflow.on.push().branches("main")
        workflow.permissions(contents=Permission.READ)
        workflow.job("build").runs_on("ubuntu-latest").step().run("make")

        assert workflow.to_yaml() == workflow.to_yaml()
        assert workflow.to_yaml(SequenceStyle.FLOW) == workflow.to_yaml(
            SequenceStyle.FLOW
        )

    def test_output_never_contains_emitter_artifacts(self) -> None:
        workflow = Workflow("CI")
        workflow.on.push()
        workflow.on.event("release")
        workflow.job("empty")

        text = workflow.to_yaml()

        assert " {}" not in text
        assert not text.endswith(DOCUMENT_END_MARKER)
        assert text.startswith(PREAMBLE)

    def test_build_document_returns_fresh_tree(self, workflow: Workflow) -> None:
        first = workflow.build_document()
        second = workflow.build_document()

        assert first is not second
        assert first.value[0][1].value == "CI"
