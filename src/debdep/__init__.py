"""
Debian Relationship Field Parser (debdep)

Turns the value of a Depends / Build-Depends / Conflicts style field into
an immutable, queryable Dependency tree, or raises ParseError.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Reading control files or .deb archives
    - Version comparison
    - Architecture wildcard matching
    - Writing relationship fields back out

It parses STRUCTURE only.

Callers feed field text in and get a tree (or a located error) back.
"""

from debdep.model import (
    Arch,
    ArchRestriction,
    Dependency,
    Possibility,
    Relation,
    Version,
    VersionOperator,
)
from debdep.parser import ParseError, ParseErrorKind, parse

__version__ = "0.1.0"

__all__ = [
    "Arch",
    "ArchRestriction",
    "Dependency",
    "Possibility",
    "Relation",
    "Version",
    "VersionOperator",
    "ParseError",
    "ParseErrorKind",
    "parse",
]
