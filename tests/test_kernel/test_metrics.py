"""Tests that decoding paths feed the prometheus counters"""

import pytest
from prometheus_client import REGISTRY

from oidgen.kernel.errors import InvalidIdentifier, MalformedLegacyData
from oidgen.object_id import ObjectId
from tests.helpers import KNOWN_BYTES


def sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_hex_parse_failure_counted() -> None:
    before = sample("oidgen_parse_failures_total", reason="hex")

    with pytest.raises(InvalidIdentifier):
        ObjectId.from_hex("nope")

    assert sample("oidgen_parse_failures_total", reason="hex") == before + 1


def test_length_failure_counted() -> None:
    before = sample("oidgen_parse_failures_total", reason="length")

    with pytest.raises(InvalidIdentifier):
        ObjectId.from_bytes(b"\x00")

    assert sample("oidgen_parse_failures_total", reason="length") == before + 1


def test_legacy_repairs_counted_by_form() -> None:
    repaired = sample("oidgen_legacy_repairs_total", form="byte_array")
    invalid = sample("oidgen_legacy_repairs_total", form="invalid")

    ObjectId.from_legacy(KNOWN_BYTES)
    with pytest.raises(MalformedLegacyData):
        ObjectId.from_legacy([1])

    assert sample("oidgen_legacy_repairs_total", form="byte_array") == repaired + 1
    assert sample("oidgen_legacy_repairs_total", form="invalid") == invalid + 1
