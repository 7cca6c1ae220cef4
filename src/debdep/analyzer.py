"""
Dependency Analyzer — inventory and early diagnostics of parsed fields.

This module provides lightweight analysis of Dependency objects:
    - Relation and alternative counts
    - Clause coverage (versioned, restricted, multiarch-qualified)
    - Package name inventory and repeats
    - Substitution variables still awaiting expansion

IMPORTANT: This is read-only. It does NOT modify the tree, compare
versions or evaluate architecture restrictions.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List

from debdep.model import Dependency


@dataclass
class DependencyReport:
    """Analysis report for one relationship field."""

    total_relations: int = 0
    total_possibilities: int = 0
    alternative_relations: int = 0

    # Clause coverage
    versioned_possibilities: int = 0
    restricted_possibilities: int = 0
    qualified_possibilities: int = 0

    # Names
    package_names: List[str] = field(default_factory=list)
    substvars: List[str] = field(default_factory=list)
    # package name -> indexes of the relations it appears in
    package_relations: Dict[str, List[int]] = field(default_factory=dict)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)

    @property
    def repeated_packages(self) -> List[str]:
        """Packages named in more than one relation."""
        return [name for name, indexes in self.package_relations.items() if len(set(indexes)) > 1]


def analyze_dependency(dep: Dependency) -> DependencyReport:
    """
    Build a DependencyReport for a parsed field.

    Warns about:
    - Packages listed in more than one relation
    - Packages listed twice within the same relation
    - Unexpanded substitution variables
    """
    report = DependencyReport()
    report.total_relations = len(dep.relations)
    report.package_names = dep.package_names()

    package_relations: Dict[str, List[int]] = defaultdict(list)

    for index, relation in enumerate(dep.relations):
        report.total_possibilities += len(relation.possibilities)
        if relation.is_alternative():
            report.alternative_relations += 1

        seen_here = set()
        for possi in relation.possibilities:
            if possi.substvar:
                report.substvars.append(possi.name)
                continue

            if possi.is_versioned():
                report.versioned_possibilities += 1
            if possi.is_restricted():
                report.restricted_possibilities += 1
            if possi.arch is not None:
                report.qualified_possibilities += 1

            if possi.name in seen_here:
                report.add_warning(f"Relation {index + 1} lists {possi.name} more than once")
            seen_here.add(possi.name)
            package_relations[possi.name].append(index)

    report.package_relations = dict(package_relations)

    for name in report.repeated_packages:
        positions = sorted(set(report.package_relations[name]))
        report.add_warning(
            f"Package {name} appears in relations {', '.join(str(i + 1) for i in positions)}"
        )

    if report.substvars:
        report.add_warning(
            f"Unexpanded substitution variables: {', '.join(report.substvars)}"
        )

    return report
