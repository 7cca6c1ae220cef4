"""
Serialization helpers for Dependency trees (Dependency, Relation, Possibility, ...).

Provides lossless JSON/YAML round-trip via an intermediate dict representation.
This is a structural export of the parsed tree, not a renderer back to
relationship-field syntax.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from debdep.model import (
    Arch,
    ArchRestriction,
    Dependency,
    Possibility,
    Relation,
    Version,
    VersionOperator,
)


def arch_to_dict(a: Arch | None) -> Dict[str, Any] | None:
    if a is None:
        return None
    return {"cpu": a.cpu, "os": a.os, "abi": a.abi}


def arch_from_dict(d: Dict[str, Any] | None) -> Arch | None:
    if d is None:
        return None
    return Arch(cpu=d["cpu"], os=d.get("os"), abi=d.get("abi"))


def version_to_dict(v: Version | None) -> Dict[str, Any] | None:
    if v is None:
        return None
    return {"operator": v.operator.value, "number": v.number}


def version_from_dict(d: Dict[str, Any] | None) -> Version | None:
    if d is None:
        return None
    return Version(operator=VersionOperator(d["operator"]), number=str(d["number"]))


def restriction_to_dict(r: ArchRestriction | None) -> Dict[str, Any] | None:
    if r is None:
        return None
    return {"negated": r.negated, "architectures": [arch_to_dict(a) for a in r.architectures]}


def restriction_from_dict(d: Dict[str, Any] | None) -> ArchRestriction | None:
    if d is None:
        return None
    return ArchRestriction(
        negated=bool(d.get("negated", False)),
        architectures=tuple(arch_from_dict(a) for a in d["architectures"]),
    )


def possibility_to_dict(p: Possibility) -> Dict[str, Any]:
    return {
        "name": p.name,
        "substvar": p.substvar,
        "arch": arch_to_dict(p.arch),
        "version": version_to_dict(p.version),
        "architectures": restriction_to_dict(p.architectures),
    }


def possibility_from_dict(d: Dict[str, Any]) -> Possibility:
    return Possibility(
        name=d["name"],
        substvar=bool(d.get("substvar", False)),
        arch=arch_from_dict(d.get("arch")),
        version=version_from_dict(d.get("version")),
        architectures=restriction_from_dict(d.get("architectures")),
    )


def relation_to_dict(r: Relation) -> Dict[str, Any]:
    return {"possibilities": [possibility_to_dict(p) for p in r.possibilities]}


def relation_from_dict(d: Dict[str, Any]) -> Relation:
    return Relation(possibilities=tuple(possibility_from_dict(p) for p in d["possibilities"]))


def dependency_to_dict(dep: Dependency) -> Dict[str, Any]:
    return {"relations": [relation_to_dict(r) for r in dep.relations]}


def dependency_from_dict(d: Dict[str, Any]) -> Dependency:
    return Dependency(relations=tuple(relation_from_dict(r) for r in d.get("relations", [])))


def dependency_to_json(dep: Dependency) -> str:
    return json.dumps(dependency_to_dict(dep), sort_keys=True)


def dependency_from_json(s: str) -> Dependency:
    d = json.loads(s)
    return dependency_from_dict(d)


def dependency_to_yaml(dep: Dependency) -> str:
    return yaml.safe_dump(dependency_to_dict(dep), sort_keys=False)


def dependency_from_yaml(s: str) -> Dependency:
    d = yaml.safe_load(s)
    return dependency_from_dict(d)
