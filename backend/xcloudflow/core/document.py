"""Document Tree — explicit tagged union for decoded StackFlow documents.

Invariants:
    - A Node is exactly one of MappingNode, SequenceNode, ScalarNode
    - Nodes are frozen; MappingNode entries are exposed read-only
    - Mapping keys are always str (enforced by from_python)
    - Typed accessors raise SchemaError on mismatch, never coerce;
      expect_shape() re-raises the mismatch as a path-anchored ValidationError

Design Decisions:
    - Tagged union over bare dict/list: every consumer must say which shape it
      expects, so shape mistakes fail loudly (ADR: no silent coercion)
    - MappingNode.replace() is copy-on-write at one level only: siblings are
      shared with the original, which is safe because nodes are immutable
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, TypeVar, Union

from xcloudflow.core.errors import SchemaError, ValidationError

Scalar = Union[str, int, float, bool, None]
T = TypeVar("T")


@dataclass(frozen=True)
class ScalarNode:
    """Leaf value: string, number, boolean or null."""
    value: Scalar = None

    @property
    def is_null(self) -> bool:
        return self.value is None


@dataclass(frozen=True)
class SequenceNode:
    """Ordered list of child nodes."""
    items: tuple["Node", ...] = ()

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> "Node":
        return self.items[index]


@dataclass(frozen=True)
class MappingNode:
    """String-keyed mapping of child nodes. Insertion order preserved."""
    entries: Mapping[str, "Node"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str) -> "Node | None":
        return self.entries.get(key)

    def items(self):
        return self.entries.items()

    def replace(self, key: str, node: "Node") -> "MappingNode":
        """Return a new mapping with one key replaced or added."""
        updated = dict(self.entries)
        updated[key] = node
        return MappingNode(updated)


Node = Union[MappingNode, SequenceNode, ScalarNode]


# ─── Typed accessors ────────────────────────────────────────────

def as_mapping(node: Node | None, path: str) -> MappingNode:
    if not isinstance(node, MappingNode):
        raise SchemaError(f"{path} must be a mapping")
    return node


def as_sequence(node: Node | None, path: str) -> SequenceNode:
    if not isinstance(node, SequenceNode):
        raise SchemaError(f"{path} must be a list")
    return node


def as_str(node: Node | None, path: str) -> str:
    if not isinstance(node, ScalarNode) or not isinstance(node.value, str):
        raise SchemaError(f"{path} must be a string")
    return node.value


def scalar_value(node: Node | None) -> Scalar:
    """Raw scalar payload, or None for missing/non-scalar nodes."""
    if isinstance(node, ScalarNode):
        return node.value
    return None


def expect_shape(
    accessor: Callable[[Node | None, str], T], node: Node | None, path: str, reason: str,
) -> T:
    """Apply a typed accessor; a shape mismatch becomes ValidationError(path, reason)."""
    try:
        return accessor(node, path)
    except SchemaError as e:
        raise ValidationError(path, reason) from e


# ─── Conversion ─────────────────────────────────────────────────

def from_python(value: Any, path: str = "$") -> Node:
    """Build a Node tree from plain Python data (e.g. YAML loader output)."""
    if isinstance(value, (MappingNode, SequenceNode, ScalarNode)):
        return value
    if isinstance(value, dict):
        entries: dict[str, Node] = {}
        for key, child in value.items():
            if not isinstance(key, str):
                raise SchemaError(
                    f"{path} has non-string key {key!r}; mapping keys must be strings"
                )
            entries[key] = from_python(child, f"{path}.{key}")
        return MappingNode(entries)
    if isinstance(value, (list, tuple)):
        return SequenceNode(tuple(
            from_python(child, f"{path}[{i}]") for i, child in enumerate(value)
        ))
    if isinstance(value, (datetime, date)):
        return ScalarNode(value.isoformat())
    if value is None or isinstance(value, (str, int, float, bool)):
        return ScalarNode(value)
    raise SchemaError(f"{path} has unsupported value type {type(value).__name__}")

