"""Shared type definitions for workflow builders."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class SequenceStyle(str, Enum):
    """Rendering style for list-valued nodes.

    BLOCK puts one item per line; FLOW renders the list inline as
    ``[a, b]``. Mappings are unaffected by either style.
    """

    BLOCK = "block"
    FLOW = "flow"


# Values accepted wherever a builder stores a plain YAML scalar
ScalarValue = str | bool | int | float

# Matrix axes, ``with`` inputs and similar free-form sections
ScalarMapping = Mapping[str, ScalarValue]
