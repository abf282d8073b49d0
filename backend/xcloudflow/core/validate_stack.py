"""StackFlow Validation — structural and semantic checks over a Document tree.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Fail-fast: the first violated rule raises ValidationError; never aggregates
    - Check order is fixed: kind -> metadata.name -> global.* -> targets -> per-target
    - Every error carries the offending document path (e.g. targets[0].domains[1])
    - Zero targets is valid

Design Decisions:
    - Raise, not return-error-dict: callers (compiler, dispatcher) propagate the
      first failure unchanged, and the dispatcher maps it to one RPC error
    - Record checks delegate to normalize() so validate and compile_plan can
      never disagree about what a valid record is
"""

from xcloudflow.core.document import (
    MappingNode, Node, ScalarNode,
    as_mapping, as_sequence, as_str, expect_shape, scalar_value,
)
from xcloudflow.core.domain_types import ValidationResult
from xcloudflow.core.errors import ValidationError
from xcloudflow.core.normalize_record import normalize

STACKFLOW_KIND = "StackFlow"


def require_str(mapping: MappingNode | None, key: str, path: str) -> str:
    """Resolve mapping[key] as a non-empty string or raise at `path`."""
    if mapping is None or key not in mapping:
        raise ValidationError(path, "missing required field")
    return _non_empty_str(mapping.get(key), path)


def mapping_or_none(node: Node | None) -> MappingNode | None:
    return node if isinstance(node, MappingNode) else None


def is_under_domain(fqdn: str, root_domain: str) -> bool:
    """True if fqdn is the root domain itself or a dot-suffixed child of it."""
    return fqdn == root_domain or fqdn.endswith("." + root_domain)


def validate(doc: MappingNode) -> ValidationResult:
    """Validate a StackFlow document. Returns a summary or raises ValidationError."""
    kind = scalar_value(doc.get("kind"))
    if kind != STACKFLOW_KIND:
        raise ValidationError("kind", f"must be {STACKFLOW_KIND}, got {kind!r}")

    name = require_str(mapping_or_none(doc.get("metadata")), "name", "metadata.name")

    global_section = mapping_or_none(doc.get("global"))
    if global_section is None:
        raise ValidationError("global", "missing required field")
    domain = require_str(global_section, "domain", "global.domain")
    dns_provider = require_str(global_section, "dns_provider", "global.dns_provider")
    cloud = require_str(global_section, "cloud", "global.cloud")

    if "targets" not in doc:
        raise ValidationError("targets", "missing required field")
    targets = expect_shape(as_sequence, doc.get("targets"), "targets", "must be a list")

    for i, target in enumerate(targets):
        _validate_target(target, f"targets[{i}]", domain)

    return ValidationResult(
        stack=name, domain=domain, dns_provider=dns_provider,
        cloud=cloud, target_count=len(targets),
    )


def _validate_target(node: Node, path: str, root_domain: str) -> None:
    target = expect_shape(as_mapping, node, path, "must be a mapping")
    require_str(target, "id", f"{path}.id")
    require_str(target, "type", f"{path}.type")

    domains = expect_shape(
        as_sequence, target.get("domains"), f"{path}.domains", "must be a non-empty list",
    )
    if len(domains) == 0:
        raise ValidationError(f"{path}.domains", "must be a non-empty list")
    for j, entry in enumerate(domains):
        fqdn = _non_empty_str(entry, f"{path}.domains[{j}]")
        if not is_under_domain(fqdn, root_domain):
            raise ValidationError(
                f"{path}.domains[{j}]",
                f"must be under global.domain ({root_domain}), got {fqdn}",
            )

    if "dns" not in target:
        return
    dns = expect_shape(as_mapping, target.get("dns"), f"{path}.dns", "must be a mapping")
    records = dns.get("records")
    if records is None or (isinstance(records, ScalarNode) and records.is_null):
        return
    records = expect_shape(as_sequence, records, f"{path}.dns.records", "must be a list")
    for k, entry in enumerate(records):
        record_path = f"{path}.dns.records[{k}]"
        record = expect_shape(as_mapping, entry, record_path, "must be a mapping")
        try:
            normalize(record)
        except ValidationError as e:
            raise e.within(record_path) from e


def _non_empty_str(node: Node | None, path: str) -> str:
    value = expect_shape(as_str, node, path, "must be a non-empty string")
    if not value.strip():
        raise ValidationError(path, "must be a non-empty string")
    return value
