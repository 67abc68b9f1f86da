"""Shortcuts that configure a step to use a common marketplace action.

Each helper takes the step to configure and returns it, so it composes with
the step's own chain:

    checkout(job.step().name("Checkout"), fetch_depth=0)
    setup_python(job.step(), "3.12").name("Set up Python")
"""

from __future__ import annotations

from actions_workflow.steps import Step
from actions_workflow.types import ScalarValue

__all__ = ["checkout", "setup_python", "upload_artifact"]

CHECKOUT_ACTION = "actions/checkout"
SETUP_PYTHON_ACTION = "actions/setup-python"
UPLOAD_ARTIFACT_ACTION = "actions/upload-artifact"


def checkout(
    step: Step, version: str = "v4", *, fetch_depth: int | None = None
) -> Step:
    """Check out the repository.

    Args:
        step: Step to configure.
        version: Action version tag.
        fetch_depth: Commits to fetch; 0 fetches the full history.
    """
    step.uses(f"{CHECKOUT_ACTION}@{version}")
    if fetch_depth is not None:
        step.with_({"fetch-depth": fetch_depth})
    return step


def setup_python(
    step: Step, python_version: str, version: str = "v5", *, cache: str | None = None
) -> Step:
    inputs: dict[str, ScalarValue] = {"python-version": python_version}
    if cache:
        inputs["cache"] = cache
    return step.uses(f"{SETUP_PYTHON_ACTION}@{version}").with_(inputs)


def upload_artifact(step: Step, name: str, path: str, version: str = "v4") -> Step:
    return step.uses(f"{UPLOAD_ARTIFACT_ACTION}@{version}").with_(
        {"name": name, "path": path}
    )
