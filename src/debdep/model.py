"""
Dependency Relation Model Objects

Defines the value tree produced by parsing a Debian relationship field
(Depends, Build-Depends, Conflicts, ...):

    - Dependency (root container, one per parsed field)
    - Relation (one comma-separated group)
    - Possibility (one `|` alternative within a group)
    - Version / VersionOperator (version constraint)
    - Arch / ArchRestriction (multiarch qualifier and [arch] lists)

ARCHITECTURAL RULE:
    These objects:
        - Are immutable (frozen dataclasses, tuples for sequences)
        - Know nothing about the text grammar they were parsed from
        - Do not compare versions or match architecture wildcards
        - Represent structure, not behavior
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class VersionOperator(Enum):
    """
    Relation operators allowed inside a version clause.

    The deprecated single-character `<` and `>` are not part of this set.
    """

    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    STRICTLY_GREATER = ">>"
    STRICTLY_LESS = "<<"
    EQUAL = "="


@dataclass(frozen=True)
class Version:
    """
    A version constraint such as `(>= 1.0)`.

    Properties:
        operator: VersionOperator enum
        number: The version string exactly as written (never parsed further)
    """

    operator: VersionOperator
    number: str


@dataclass(frozen=True)
class Arch:
    """
    An architecture token, as used by multiarch qualifiers (`foo:amd64`)
    and restriction lists (`[linux-any !hurd-i386]`).

    Examples:
        - amd64            -> cpu="amd64"
        - linux-any        -> os="linux", cpu="any"
        - gnu-linux-amd64  -> abi="gnu", os="linux", cpu="amd64"

    IMPORTANT:
        Names are recorded, not validated. Wildcard matching
        belongs to whoever consumes the tree.
    """

    cpu: str
    os: Optional[str] = None
    abi: Optional[str] = None

    def __post_init__(self):
        if not self.cpu or "" in (self.os, self.abi):
            raise ValueError(f"Empty part in architecture {self.name!r}")

    @classmethod
    def from_token(cls, token: str) -> "Arch":
        parts = token.rsplit("-", 2)
        if len(parts) == 3:
            return cls(cpu=parts[2], os=parts[1], abi=parts[0])
        if len(parts) == 2:
            return cls(cpu=parts[1], os=parts[0])
        return cls(cpu=token)

    @property
    def name(self) -> str:
        """The token as it was written."""
        return "-".join(part for part in (self.abi, self.os, self.cpu) if part is not None)


@dataclass(frozen=True)
class ArchRestriction:
    """
    A bracketed architecture list, e.g. `[amd64 sparc]` or `[!hurd-i386]`.

    Properties:
        negated: True when every entry was written with a leading `!`
        architectures: Entries in written order (never empty)

    INVARIANT:
        Entries are either all negated or all plain, so a single flag
        describes the whole clause.
    """

    negated: bool
    architectures: Tuple[Arch, ...]

    def __post_init__(self):
        if not self.architectures:
            raise ValueError("ArchRestriction requires at least one architecture")

    def cpus(self) -> List[str]:
        return [arch.cpu for arch in self.architectures]


@dataclass(frozen=True)
class Possibility:
    """
    One alternative within a relation.

    Properties:
        name:
            Package name, or the interior of a `${...}` substitution variable

        substvar:
            True when the name was written as `${...}`

        arch:
            Multiarch qualifier (`foo:amd64`), if present

        version:
            Version constraint (`foo (>= 1.0)`), if present

        architectures:
            Architecture restriction (`foo [amd64]`), if present

    Every optional clause is None when absent; there are no sentinel values.
    """

    name: str
    substvar: bool = False
    arch: Optional[Arch] = None
    version: Optional[Version] = None
    architectures: Optional[ArchRestriction] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Possibility requires a name")

    def is_versioned(self) -> bool:
        return self.version is not None

    def is_restricted(self) -> bool:
        return self.architectures is not None


@dataclass(frozen=True)
class Relation:
    """
    One comma-separated group. It is satisfied if any possibility is.

    INVARIANT:
        A relation always holds at least one possibility.
    """

    possibilities: Tuple[Possibility, ...]

    def __post_init__(self):
        if not self.possibilities:
            raise ValueError("Relation requires at least one possibility")

    def is_alternative(self) -> bool:
        """True when the group offers a choice (`a | b`)."""
        return len(self.possibilities) > 1


@dataclass(frozen=True)
class Dependency:
    """
    Root container for one parsed relationship field.

    Relations keep their written order. Order matters to resolvers but
    not to the parser.
    """

    relations: Tuple[Relation, ...] = ()

    def get_all_possibilities(self) -> List[Possibility]:
        """
        Flatten every relation into a single list.

        Returns:
            All possibilities, relation by relation, in written order
        """
        return [possi for relation in self.relations for possi in relation.possibilities]

    def get_substvars(self) -> List[Possibility]:
        """Possibilities that are `${...}` substitution variables."""
        return [possi for possi in self.get_all_possibilities() if possi.substvar]

    def find_possibilities(self, name: str) -> List[Possibility]:
        """
        Retrieve every possibility naming a package.

        Args:
            name: Package name (or substvar interior)

        Returns:
            Matching possibilities, possibly empty
        """
        return [possi for possi in self.get_all_possibilities() if possi.name == name]

    def package_names(self) -> List[str]:
        """Unique package names in first-seen order, substvars excluded."""
        names: List[str] = []
        for possi in self.get_all_possibilities():
            if not possi.substvar and possi.name not in names:
                names.append(possi.name)
        return names
