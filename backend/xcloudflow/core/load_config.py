"""Config Loader — decodes raw StackFlow YAML into a Document tree.

Invariants:
    - Returns a MappingNode or raises; never returns a partial tree
    - Malformed YAML (or undecodable bytes) -> ParseError("yaml parse: ...")
    - Empty document or non-mapping root -> SchemaError("config must be a mapping")
    - Alias expansion is bounded: a self-referencing alias or an expanded tree
      larger than the node budget -> ParseError, checked before construction
    - Plain scalars resolve with YAML 1.2 core rules: only true/false are
      booleans, 0300 is decimal 300, no implicit timestamps

Design Decisions:
    - SafeLoader subclass only: documents come from RPC callers, no arbitrary tags
    - compose -> size check -> construct: the budget is enforced on the node
      graph, where an alias is a shared node, so checking costs O(source)
      instead of O(expanded tree)
"""

import re

import yaml

from xcloudflow.core.document import MappingNode, from_python
from xcloudflow.core.errors import ParseError, SchemaError

NODE_BUDGET_PER_BYTE = 100
MIN_NODE_BUDGET = 10_000

_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"
_BOOL_TAG = "tag:yaml.org,2002:bool"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_YAML11_TAGS = {_INT_TAG, _FLOAT_TAG, _BOOL_TAG, _TIMESTAMP_TAG}


class StackFlowLoader(yaml.SafeLoader):
    """SafeLoader with YAML 1.2 core-schema resolution for plain scalars."""

    yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag not in _YAML11_TAGS]
        for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }


def _construct_int(loader: StackFlowLoader, node: yaml.ScalarNode) -> int:
    text = loader.construct_scalar(node)
    sign, digits = (-1, text[1:]) if text.startswith("-") else (1, text.lstrip("+"))
    try:
        if digits.startswith("0o"):
            return sign * int(digits[2:], 8)
        if digits.startswith("0x"):
            return sign * int(digits[2:], 16)
        return sign * int(digits, 10)
    except ValueError:
        raise yaml.constructor.ConstructorError(
            None, None, f"invalid integer {text!r}", node.start_mark,
        )


StackFlowLoader.add_implicit_resolver(
    _BOOL_TAG, re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"), list("tTfF"),
)
StackFlowLoader.add_implicit_resolver(
    _INT_TAG, re.compile(r"^(?:[-+]?[0-9]+|0o[0-7]+|0x[0-9a-fA-F]+)$"),
    list("-+0123456789"),
)
StackFlowLoader.add_implicit_resolver(
    _FLOAT_TAG,
    re.compile(
        r"^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?"
        r"|[-+]?\.(?:inf|Inf|INF)|\.(?:nan|NaN|NAN))$"
    ),
    list("-+0123456789."),
)
StackFlowLoader.add_constructor(_INT_TAG, _construct_int)


def parse(source: bytes | str) -> MappingNode:
    """Parse StackFlow YAML source into a MappingNode root."""
    try:
        data = _load(source)
    except yaml.YAMLError as e:
        raise ParseError(_describe(e)) from e
    except RecursionError as e:
        raise ParseError("document nesting too deep") from e
    if not isinstance(data, dict):
        raise SchemaError("config must be a mapping")
    try:
        return from_python(data)
    except RecursionError as e:
        raise ParseError("document nesting too deep") from e


def _load(source: bytes | str):
    loader = StackFlowLoader(source)
    try:
        root = loader.get_single_node()
        if root is None:
            return None
        check_expansion(root, node_budget(source))
        return loader.construct_document(root)
    finally:
        loader.dispose()


def node_budget(source: bytes | str) -> int:
    """Maximum node count of the fully expanded tree for a source of this size."""
    return max(MIN_NODE_BUDGET, NODE_BUDGET_PER_BYTE * len(source))


def check_expansion(root: yaml.Node, budget: int) -> int:
    """Expanded node count of a composed graph; raises ParseError past budget or on a cycle."""
    sizes: dict[int, int] = {}
    active: set[int] = set()

    def expanded(node: yaml.Node) -> int:
        key = id(node)
        if key in sizes:
            return sizes[key]
        if key in active:
            raise ParseError("anchor value contains itself")
        active.add(key)
        if isinstance(node, yaml.SequenceNode):
            children = node.value
        elif isinstance(node, yaml.MappingNode):
            children = [child for pair in node.value for child in pair]
        else:
            children = []
        total = 1
        for child in children:
            total += expanded(child)
            if total > budget:
                raise ParseError("excessive aliasing")
        active.discard(key)
        sizes[key] = total
        return total

    return expanded(root)


def _describe(error: yaml.YAMLError) -> str:
    """One-line description of a YAML error, including position when known."""
    problem = getattr(error, "problem", None)
    mark = getattr(error, "problem_mark", None)
    if problem and mark is not None:
        return f"{problem} (line {mark.line + 1}, column {mark.column + 1})"
    return " ".join(str(error).split())
