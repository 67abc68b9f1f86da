"""Permission scopes, levels and the ``permissions`` section resolver.

GitHub Actions accepts ``permissions`` either as one of the bulk tokens
``read-all`` / ``write-all`` or as a mapping from scope to level. The
workflow (and each job) holds a single ``PermissionConfig`` value; every
permission-setting call replaces it wholesale, so the most recent call
always decides what is rendered.

Rendered custom permissions always list every scope, in declaration order
of ``PermissionScope``:

    permissions:
      actions: none
      checks: none
      contents: write
      ...
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from yaml.nodes import MappingNode

from actions_workflow.nodes import add_node, mapping_node

__all__ = [
    "Permission",
    "PermissionScope",
    "PermissionMode",
    "PermissionConfig",
    "build_permissions_node",
]


class Permission(str, Enum):
    """Access level granted to a permission scope."""

    NONE = "none"
    READ = "read"
    WRITE = "write"


class PermissionScope(str, Enum):
    """Fixed set of permission scopes, in canonical output order.

    Member values are the kebab-case keys used in the document; member names
    lowercased are the keyword arguments accepted by ``permissions()``.
    """

    ACTIONS = "actions"
    CHECKS = "checks"
    CONTENTS = "contents"
    DEPLOYMENTS = "deployments"
    DISCUSSIONS = "discussions"
    ID_TOKEN = "id-token"
    ISSUES = "issues"
    PACKAGES = "packages"
    PAGES = "pages"
    PULL_REQUESTS = "pull-requests"
    REPOSITORY_PROJECTS = "repository-projects"
    SECURITY_EVENTS = "security-events"
    STATUSES = "statuses"


class PermissionMode(str, Enum):
    NOT_SPECIFIED = "not-specified"
    READ_ALL = "read-all"
    WRITE_ALL = "write-all"
    CUSTOM = "custom"


@dataclass(frozen=True)
class PermissionConfig:
    """Permission state of a workflow or job.

    Use the constructors rather than building instances directly:
    ``not_specified()``, ``read_all()``, ``write_all()`` and ``custom()``.
    Only CUSTOM carries scopes; the other modes always have an empty map.

    Attributes:
        mode: Which permission form to render.
        scopes: Level per scope. Complete (every scope present) for CUSTOM.
    """

    mode: PermissionMode = PermissionMode.NOT_SPECIFIED
    scopes: Mapping[PermissionScope, Permission] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def not_specified(cls) -> PermissionConfig:
        return cls(PermissionMode.NOT_SPECIFIED)

    @classmethod
    def read_all(cls) -> PermissionConfig:
        return cls(PermissionMode.READ_ALL)

    @classmethod
    def write_all(cls) -> PermissionConfig:
        return cls(PermissionMode.WRITE_ALL)

    @classmethod
    def custom(
        cls, scopes: Mapping[PermissionScope, Permission] | None = None
    ) -> PermissionConfig:
        """Build a CUSTOM config holding every scope.

        Args:
            scopes: Levels for the scopes being granted. Missing scopes
                default to ``Permission.NONE``.

        Returns:
            PermissionConfig in CUSTOM mode.
        """
        given = scopes or {}
        complete = {
            scope: Permission(given.get(scope, Permission.NONE))
            for scope in PermissionScope
        }
        return cls(PermissionMode.CUSTOM, MappingProxyType(complete))

    @classmethod
    def from_levels(
        cls,
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
    ) -> PermissionConfig:
        """Build a CUSTOM config from one keyword per scope.

        The keyword list is closed: an unknown scope is a ``TypeError``
        raised by the call itself.
        """
        return cls.custom(
            {
                PermissionScope.ACTIONS: actions,
                PermissionScope.CHECKS: checks,
                PermissionScope.CONTENTS: contents,
                PermissionScope.DEPLOYMENTS: deployments,
                PermissionScope.DISCUSSIONS: discussions,
                PermissionScope.ID_TOKEN: id_token,
                PermissionScope.ISSUES: issues,
                PermissionScope.PACKAGES: packages,
                PermissionScope.PAGES: pages,
                PermissionScope.PULL_REQUESTS: pull_requests,
                PermissionScope.REPOSITORY_PROJECTS: repository_projects,
                PermissionScope.SECURITY_EVENTS: security_events,
                PermissionScope.STATUSES: statuses,
            }
        )


def build_permissions_node(parent: MappingNode, config: PermissionConfig) -> None:
    """Append the ``permissions`` section for ``config`` to ``parent``.

    Args:
        parent: Mapping node receiving the section (workflow root or job).
        config: Permission state to render.
    """
    if config.mode is PermissionMode.NOT_SPECIFIED:
        return

    if config.mode in (PermissionMode.READ_ALL, PermissionMode.WRITE_ALL):
        add_node(parent, "permissions", config.mode.value)
        return

    scopes_node = mapping_node()
    for scope in PermissionScope:
        level = config.scopes.get(scope, Permission.NONE)
        add_node(scopes_node, scope.value, level.value)
    add_node(parent, "permissions", scopes_node)
