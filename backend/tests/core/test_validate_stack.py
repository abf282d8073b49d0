"""StackFlow Validation — tests for fail-fast structural and semantic checks.

Tests cover:
    - Happy path summary (ok, stack, domain, dns_provider, cloud, targetCount)
    - kind, metadata.name, global.* checks in order
    - targets presence/shape; zero targets valid
    - Per-target id/type/domains/dns checks with indexed paths
    - Record errors re-anchored under targets[i].dns.records[k]
"""

import pytest

from xcloudflow.core.document import from_python
from xcloudflow.core.errors import ValidationError
from xcloudflow.core.validate_stack import is_under_domain, validate

from tests.stackflow_samples import make_doc, make_stack, minimal_stack


def _error(stack: dict) -> ValidationError:
    with pytest.raises(ValidationError) as exc:
        validate(from_python(stack))
    return exc.value


def _target(**overrides) -> dict:
    target = {"id": "api", "type": "service", "domains": ["api.example.com"]}
    target.update(overrides)
    return target


# ─── happy path ──────────────────────────────────────────────────

def test_valid_document_summary():
    result = validate(make_doc())
    assert result.to_dict() == {
        "ok": True,
        "stack": "web",
        "domain": "example.com",
        "dns_provider": "cloudflare",
        "cloud": "gcp",
        "targetCount": 1,
    }


def test_zero_targets_is_valid():
    result = validate(from_python(minimal_stack([])))
    assert result.target_count == 0


def test_root_domain_itself_is_allowed():
    result = validate(from_python(minimal_stack([_target(domains=["example.com"])])))
    assert result.ok


def test_target_without_dns_is_valid():
    assert validate(from_python(minimal_stack([_target()]))).target_count == 1


def test_null_records_is_valid():
    stack = minimal_stack([_target(dns={"records": None})])
    assert validate(from_python(stack)).ok


# ─── kind / metadata / global ────────────────────────────────────

@pytest.mark.parametrize("kind", ["Stack", "stackflow", 1, None])
def test_wrong_kind_names_kind(kind):
    err = _error(make_stack(kind=kind))
    assert err.path == "kind"
    assert err.message.startswith("kind:")


def test_missing_kind():
    stack = make_stack()
    del stack["kind"]
    assert _error(stack).path == "kind"


def test_missing_metadata_name():
    err = _error(make_stack(metadata={}))
    assert err.path == "metadata.name"
    assert err.reason == "missing required field"


def test_blank_metadata_name():
    err = _error(make_stack(metadata={"name": "  "}))
    assert err.message == "metadata.name: must be a non-empty string"


def test_missing_global():
    stack = make_stack()
    del stack["global"]
    assert _error(stack).path == "global"


def test_missing_domain_fails_before_targets():
    stack = make_stack(targets="not-a-list")
    del stack["global"]["domain"]
    err = _error(stack)
    assert err.path == "global.domain"


@pytest.mark.parametrize("field", ["dns_provider", "cloud"])
def test_missing_global_field(field):
    stack = make_stack()
    del stack["global"][field]
    assert _error(stack).path == f"global.{field}"


# ─── targets ─────────────────────────────────────────────────────

def test_missing_targets():
    stack = make_stack()
    del stack["targets"]
    err = _error(stack)
    assert err.path == "targets"
    assert err.reason == "missing required field"


def test_targets_not_a_list():
    err = _error(make_stack(targets={"id": "api"}))
    assert err.message == "targets: must be a list"


def test_target_not_a_mapping():
    assert _error(minimal_stack(["api"])).path == "targets[0]"


@pytest.mark.parametrize("field", ["id", "type"])
def test_target_requires_id_and_type(field):
    target = _target()
    del target[field]
    err = _error(minimal_stack([_target(id="ok"), target]))
    assert err.path == f"targets[1].{field}"


@pytest.mark.parametrize("domains", [None, [], "api.example.com"])
def test_domains_must_be_non_empty_list(domains):
    err = _error(minimal_stack([_target(domains=domains)]))
    assert err.path == "targets[0].domains"


def test_blank_domain_entry():
    err = _error(minimal_stack([_target(domains=["api.example.com", ""])]))
    assert err.path == "targets[0].domains[1]"
    assert err.reason == "must be a non-empty string"


@pytest.mark.parametrize("fqdn", ["evil.com", "notexample.com", "example.com.evil.org"])
def test_domain_outside_root_identifies_index(fqdn):
    err = _error(minimal_stack([_target(), _target(domains=["www.example.com", fqdn])]))
    assert err.path == "targets[1].domains[1]"
    assert fqdn in err.message
    assert "global.domain (example.com)" in err.message


def test_dns_must_be_mapping():
    err = _error(minimal_stack([_target(dns=["a"])]))
    assert err.message == "targets[0].dns: must be a mapping"


def test_records_must_be_list():
    err = _error(minimal_stack([_target(dns={"records": {"name": "a"}})]))
    assert err.path == "targets[0].dns.records"


def test_record_must_be_mapping():
    err = _error(minimal_stack([_target(dns={"records": ["a"]})]))
    assert err.path == "targets[0].dns.records[0]"


def test_record_error_is_reanchored():
    records = [
        {"name": "api", "type": "A", "value": "1.2.3.4"},
        {"name": "www", "type": "CNAME"},
    ]
    err = _error(minimal_stack([_target(dns={"records": records})]))
    assert err.path == "targets[0].dns.records[1]"
    assert err.message == (
        "targets[0].dns.records[1]: entries require either value or valueFrom"
    )


def test_record_field_error_includes_field():
    records = [{"name": "api", "type": "A", "value": "1.2.3.4", "ttl": 0}]
    err = _error(minimal_stack([_target(dns={"records": records})]))
    assert err.path == "targets[0].dns.records[0].ttl"


# ─── is_under_domain ─────────────────────────────────────────────

def test_is_under_domain():
    assert is_under_domain("example.com", "example.com")
    assert is_under_domain("a.b.example.com", "example.com")
    assert not is_under_domain("badexample.com", "example.com")
