"""Environment Overlay — shallow-merges global.environments.<env> into global.

Invariants:
    - All functions are PURE: input documents are never mutated
    - Missing global / environments / env name -> document returned unchanged
    - Merge is one level deep: override values replace global values wholesale
    - Only the `global` key of the root is replaced; other sections are shared

Design Decisions:
    - Lenient on unknown env (returns doc unchanged), unlike compile_plan which
      raises NotFoundError. The asymmetry is observed behavior and kept as-is
      until product decides otherwise.
    - merge_shallow is a dedicated function, not a deep-merge utility, so nested
      mappings (e.g. a per-env `tags` block) are never merged field-by-field
"""

from xcloudflow.core.document import MappingNode


def merge_shallow(base: MappingNode, override: MappingNode) -> MappingNode:
    """New mapping with every key of `override` replacing the same key in `base`."""
    merged = dict(base.entries)
    for key, value in override.items():
        merged[key] = value
    return MappingNode(merged)


def apply_overlay(doc: MappingNode, env_name: str) -> MappingNode:
    """Apply the named environment's overrides to the document's global section."""
    global_section = doc.get("global")
    if not isinstance(global_section, MappingNode):
        return doc
    environments = global_section.get("environments")
    if not isinstance(environments, MappingNode):
        return doc
    override = environments.get(env_name)
    if not isinstance(override, MappingNode):
        return doc
    return doc.replace("global", merge_shallow(global_section, override))
