"""Text finisher: node tree to final workflow text.

Serialization is a two-stage pipeline:

1. ``serialize_node`` hands the node tree to PyYAML's emitter unchanged.
2. ``apply_text_corrections`` rewrites the emitter's output into the shape
   GitHub Actions documents conventionally have: the generated-file header
   goes on top, empty mappings render as a bare ``key:`` and the explicit
   document-end marker is removed.

If PyYAML ever changes how it renders empty mappings or document ends, only
the constants below need updating.
"""

from __future__ import annotations

import re

import yaml
from yaml.nodes import Node

from actions_workflow.config import WorkflowSettings
from actions_workflow.logging import get_logger
from actions_workflow.nodes import BOOL_TAG

__all__ = [
    "DOCUMENT_END_MARKER",
    "EMPTY_MAPPING_MARKER",
    "HEADER",
    "WorkflowDumper",
    "apply_text_corrections",
    "finish_document",
    "serialize_node",
]

logger = get_logger(__name__)

HEADER = "# This was generated by tool. Edits will be overwritten."

# How the emitter renders a mapping value with zero entries (``on: {}``)
EMPTY_MAPPING_MARKER = " {}"

# Written after the last content line when ``explicit_end`` is set
DOCUMENT_END_MARKER = "...\n"


class WorkflowDumper(yaml.SafeDumper):
    """SafeDumper that only treats ``true``/``false`` as booleans.

    The YAML 1.1 resolver also reads ``on``, ``off``, ``yes`` and ``no`` as
    booleans and would quote them, turning the ``on:`` key into ``'on':``.
    """


WorkflowDumper.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != BOOL_TAG]
    for first, resolvers in yaml.SafeDumper.yaml_implicit_resolvers.items()
}
WorkflowDumper.add_implicit_resolver(
    BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def serialize_node(node: Node, settings: WorkflowSettings) -> str:
    """Serialize a node tree with the generic YAML emitter.

    Args:
        node: Root node of the document.
        settings: Rendering settings (line width, indent, unicode).

    Returns:
        Raw emitter output, terminated by ``DOCUMENT_END_MARKER``.
    """
    text: str = yaml.serialize(
        node,
        Dumper=WorkflowDumper,
        explicit_end=True,
        width=settings.line_width,
        indent=settings.indent,
        allow_unicode=settings.allow_unicode,
    )
    return text


def apply_text_corrections(text: str) -> str:
    """Prepend the header and remove emitter artifacts from ``text``.

    Args:
        text: Raw emitter output.

    Returns:
        Header, blank line and document body, with every
        ``EMPTY_MAPPING_MARKER`` removed and the trailing
        ``DOCUMENT_END_MARKER`` trimmed.
    """
    document = f"{HEADER}\n\n{text}"
    document = document.replace(EMPTY_MAPPING_MARKER, "")
    if document.endswith(DOCUMENT_END_MARKER):
        document = document[: -len(DOCUMENT_END_MARKER)]
    return document


def finish_document(node: Node, settings: WorkflowSettings) -> str:
    """Turn an assembled document node into the final workflow text."""
    raw = serialize_node(node, settings)
    logger.debug("document_serialized", raw_length=len(raw))
    return apply_text_corrections(raw)
