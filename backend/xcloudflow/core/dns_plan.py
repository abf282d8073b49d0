"""DNS Plan Compilation — overlay + validate + emit an ordered DNS record plan.

Invariants:
    - PURE: no IO, input document never mutated
    - Non-blank env must exist in the input document's global.environments (NotFoundError),
      stricter than apply_overlay which silently ignores unknown envs
    - Validation runs on the overlaid document; its errors propagate unchanged
    - Records ordered by (target declaration order, record declaration order);
      no sorting, no dedup
    - Every emitted record carries target = owning target id
    - Post-validation reads go through typed accessors: a shape that validate()
      should have rejected surfaces as SchemaError, never as a bare assert
"""

from dataclasses import replace

from xcloudflow.core.document import MappingNode, Node, ScalarNode, as_mapping, as_sequence
from xcloudflow.core.domain_types import DNSPlan, NormalizedDNSRecord
from xcloudflow.core.env_overlay import apply_overlay
from xcloudflow.core.errors import NotFoundError, ValidationError
from xcloudflow.core.normalize_record import normalize
from xcloudflow.core.validate_stack import mapping_or_none, require_str, validate


def require_environment(doc: MappingNode, env: str) -> None:
    """Raise NotFoundError unless env is declared under global.environments."""
    global_section = mapping_or_none(doc.get("global"))
    environments = (
        mapping_or_none(global_section.get("environments"))
        if global_section is not None else None
    )
    if environments is None or env not in environments:
        raise NotFoundError(f"env not found in global.environments: {env}")


def compile_plan(doc: MappingNode, env: str = "") -> DNSPlan:
    """Compile a StackFlow document (optionally for one environment) into a DNSPlan."""
    effective = doc
    if env.strip():
        require_environment(doc, env)
        effective = apply_overlay(doc, env)

    validate(effective)

    name = require_str(mapping_or_none(effective.get("metadata")), "name", "metadata.name")
    global_section = mapping_or_none(effective.get("global"))
    domain = require_str(global_section, "domain", "global.domain")
    dns_provider = require_str(global_section, "dns_provider", "global.dns_provider")

    records: list[NormalizedDNSRecord] = []
    targets = as_sequence(effective.get("targets"), "targets")
    for i, target in enumerate(targets):
        records.extend(_target_records(target, f"targets[{i}]"))

    return DNSPlan(
        stack=name, env=env.strip(), domain=domain,
        dns_provider=dns_provider, records=tuple(records),
    )


def _target_records(node: Node, path: str) -> list[NormalizedDNSRecord]:
    target = as_mapping(node, path)
    target_id = require_str(target, "id", f"{path}.id")
    dns = mapping_or_none(target.get("dns"))
    if dns is None:
        return []
    raw_records = dns.get("records")
    if raw_records is None or (isinstance(raw_records, ScalarNode) and raw_records.is_null):
        return []
    out = []
    for k, raw in enumerate(as_sequence(raw_records, f"{path}.dns.records")):
        record_path = f"{path}.dns.records[{k}]"
        try:
            record = normalize(as_mapping(raw, record_path))
        except ValidationError as e:
            raise e.within(record_path) from e
        out.append(replace(record, target=target_id))
    return out
