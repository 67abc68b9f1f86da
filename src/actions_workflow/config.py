from __future__ import annotations

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from actions_workflow.exceptions import ConfigError
from actions_workflow.logging import get_logger

__all__ = [
    "WorkflowSettings",
    "load_settings",
]

logger = get_logger(__name__)


class WorkflowSettings(BaseSettings):
    """Rendering settings for generated workflow documents.

    Values are read from ``ACTIONS_WORKFLOW_*`` environment variables.

    Attributes:
        line_width: Emitter line width. Kept wide so long ``run`` commands
            stay on one line instead of being folded.
        indent: Number of spaces per mapping level.
        allow_unicode: Emit non-ASCII characters as-is instead of escaping.
    """

    model_config = SettingsConfigDict(
        env_prefix="ACTIONS_WORKFLOW_",
        extra="ignore",
    )

    line_width: int = Field(default=4096, ge=40)
    indent: int = Field(default=2, ge=2, le=9)
    allow_unicode: bool = True


def load_settings() -> WorkflowSettings:
    """Load rendering settings from the environment.

    Returns:
        WorkflowSettings instance.

    Raises:
        ConfigError: If an environment variable holds an invalid value.
    """
    try:
        return WorkflowSettings()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        logger.warning("settings_invalid", field=field, error=first_error["msg"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
