"""DNS Record Normalization — validates and canonicalizes one raw record.

Invariants:
    - PURE: no IO, input node untouched
    - Checks run in a fixed order; the first violation raises ValidationError
      with a path relative to the record (callers re-anchor via .within())
    - valueFrom wins over value when both are present; value is dropped
    - Unrecognized keys are dropped; normalize(normalize(x)) == normalize(x)
"""

from xcloudflow.core.document import MappingNode, as_str, expect_shape, scalar_value
from xcloudflow.core.domain_types import NormalizedDNSRecord
from xcloudflow.core.errors import ValidationError


def normalize(raw: MappingNode) -> NormalizedDNSRecord:
    """Validate one raw DNS record mapping and return its canonical form."""
    if "name" not in raw or "type" not in raw:
        raise ValidationError("", "entries require name and type")
    name = _non_empty_str(raw, "name")
    rtype = _non_empty_str(raw, "type").strip().upper()

    value = value_from = None
    if "valueFrom" in raw:
        value_from = _non_empty_str(raw, "valueFrom")
    elif "value" in raw:
        value = _non_empty_str(raw, "value")
    else:
        raise ValidationError("", "entries require either value or valueFrom")

    ttl = None
    if "ttl" in raw:
        ttl = scalar_value(raw.get("ttl"))
        # bool is an int subclass; `ttl: true` is not a TTL
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
            raise ValidationError("ttl", "must be a positive integer")

    proxied = None
    if "proxied" in raw:
        proxied = scalar_value(raw.get("proxied"))
        if not isinstance(proxied, bool):
            raise ValidationError("proxied", "must be a boolean")

    return NormalizedDNSRecord(
        name=name, type=rtype, value=value, value_from=value_from,
        ttl=ttl, proxied=proxied,
    )


def _non_empty_str(raw: MappingNode, key: str) -> str:
    value = expect_shape(as_str, raw.get(key), key, "must be a non-empty string")
    if not value.strip():
        raise ValidationError(key, "must be a non-empty string")
    return value
