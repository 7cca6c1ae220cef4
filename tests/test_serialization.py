"""
Tests for serialization and deserialization of Dependency trees.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `debdep.serialization`.
"""

import json

import pytest
import yaml

from debdep.parser import parse
from debdep.serialization import (
    dependency_to_dict,
    dependency_from_dict,
    dependency_to_json,
    dependency_from_json,
    dependency_to_yaml,
    dependency_from_yaml,
    possibility_to_dict,
)


SAMPLE_FIELD = (
    "${misc:Depends}, libc6:amd64 (>= 2.36) [linux-any], "
    "python3 (<< 3.13) | pypy3 [!hurd-i386 !kfreebsd-amd64]"
)


def test_possibility_dict_shape():
    possi = parse("foo:i386 (= 1.0) [amd64]").relations[0].possibilities[0]
    assert possibility_to_dict(possi) == {
        "name": "foo",
        "substvar": False,
        "arch": {"cpu": "i386", "os": None, "abi": None},
        "version": {"operator": "=", "number": "1.0"},
        "architectures": {
            "negated": False,
            "architectures": [{"cpu": "amd64", "os": None, "abi": None}],
        },
    }


def test_dict_roundtrip():
    dep = parse(SAMPLE_FIELD)
    assert dependency_from_dict(dependency_to_dict(dep)) == dep


def test_json_roundtrip():
    dep = parse(SAMPLE_FIELD)
    json_str = dependency_to_json(dep)
    assert len(json.loads(json_str)["relations"]) == 3
    assert dependency_from_json(json_str) == dep


def test_yaml_roundtrip():
    dep = parse(SAMPLE_FIELD)
    yaml_str = dependency_to_yaml(dep)
    restored = dependency_from_yaml(yaml_str)
    assert restored == dep


def test_yaml_keeps_version_as_string():
    """Numbers like 1.0 must not come back as floats."""
    yaml_str = dependency_to_yaml(parse("foo (>= 1.0)"))
    data = yaml.safe_load(yaml_str)
    assert data["relations"][0]["possibilities"][0]["version"]["number"] == "1.0"


def test_empty_architecture_list_rejected():
    """Imported trees obey the same invariants as parsed ones."""
    d = dependency_to_dict(parse("foo [amd64]"))
    d["relations"][0]["possibilities"][0]["architectures"]["architectures"] = []
    with pytest.raises(ValueError):
        dependency_from_dict(d)


def test_empty_name_rejected():
    d = dependency_to_dict(parse("foo"))
    d["relations"][0]["possibilities"][0]["name"] = ""
    with pytest.raises(ValueError):
        dependency_from_dict(d)


def test_empty_cpu_rejected():
    d = dependency_to_dict(parse("foo:amd64"))
    d["relations"][0]["possibilities"][0]["arch"]["cpu"] = ""
    with pytest.raises(ValueError):
        dependency_from_dict(d)


def test_unknown_operator_rejected():
    d = dependency_to_dict(parse("foo (>= 1)"))
    d["relations"][0]["possibilities"][0]["version"]["operator"] = "<"
    with pytest.raises(ValueError):
        dependency_from_dict(d)
