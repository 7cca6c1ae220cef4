"""
Relationship Field Parser (raw field text -> Dependency tree).

Parses the value of a Debian relationship field such as Depends,
Build-Depends or Conflicts.

Grammar:
    field        := relation ("," relation)*
    relation     := possibility ("|" possibility)*
    possibility  := substvar | name [":" arch] clause*
    clause       := version | restriction        (each at most once)
    version      := "(" operator number ")"
    restriction  := "[" ["!"] arch (ws ["!"] arch)* "]"
    substvar     := "${" text "}"
    operator     := ">=" | "<=" | ">>" | "<<" | "="

Stages:
    1. split_relations     - top-level "," (pure segmentation)
    2. split_possibilities - top-level "|" (pure segmentation)
    3. parse_possibility   - name, qualifier and clauses (single pass)

Every failure raises ParseError immediately. No partial tree is returned.
"""

import logging
from enum import Enum
from typing import List, Optional, Tuple

from debdep.model import (
    Arch,
    ArchRestriction,
    Dependency,
    Possibility,
    Relation,
    Version,
    VersionOperator,
)

logger = logging.getLogger(__name__)

_OPENERS = "(["
_CLOSERS = ")]"

# Characters that end a package name or multiarch qualifier (besides whitespace)
_NAME_STOP = ":()[]"
_NUMBER_STOP = "()[]"
_ARCH_STOP = "!()[],|"

# Two-character operators must be tried before "="
_OPERATOR_TABLE = (
    VersionOperator.GREATER_EQUAL,
    VersionOperator.LESS_EQUAL,
    VersionOperator.STRICTLY_GREATER,
    VersionOperator.STRICTLY_LESS,
    VersionOperator.EQUAL,
)


class ParseErrorKind(Enum):
    """Reasons a relationship field can be rejected."""

    EMPTY_RELATION = "EmptyRelation"
    EMPTY_POSSIBILITY = "EmptyPossibility"
    EMPTY_NAME = "EmptyName"
    DUPLICATE_VERSION = "DuplicateVersion"
    DUPLICATE_ARCHITECTURE = "DuplicateArchitecture"
    MALFORMED_VERSION = "MalformedVersion"
    UNTERMINATED_ARCHITECTURE = "UnterminatedArchitecture"
    MIXED_ARCH_NEGATION = "MixedArchNegation"
    MALFORMED_ARCHITECTURE = "MalformedArchitecture"
    TRAILING_INPUT = "TrailingInput"
    MALFORMED_SUBSTVAR = "MalformedSubstvar"
    MALFORMED_MULTIARCH = "MalformedMultiarch"


class ParseError(Exception):
    """
    Raised when a relationship field cannot be parsed.

    Attributes:
        kind: ParseErrorKind
        message: Description without position
        position: 0-based offset into the original field text
        text: The original field text
    """

    def __init__(self, kind: ParseErrorKind, message: str, position: int, text: str = ""):
        super().__init__(kind, message, position, text)
        self.kind = kind
        self.message = message
        self.position = position
        self.text = text

    def __str__(self) -> str:
        return f"{self.message} (at position {self.position})"


def _split_top_level(text: str, delimiter: str, offset: int) -> List[Tuple[str, int]]:
    """
    Split on `delimiter` wherever it is outside (...) and [...].

    Returns (segment, absolute offset) pairs with each segment stripped
    and its offset pointing at its first non-blank character.
    """
    segments = []
    depth = 0
    start = 0
    for index, char in enumerate(text):
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS and depth > 0:
            depth -= 1
        elif char == delimiter and depth == 0:
            segments.append(_trimmed(text, start, index, offset))
            start = index + 1
    segments.append(_trimmed(text, start, len(text), offset))
    return segments


def _trimmed(text: str, start: int, end: int, offset: int) -> Tuple[str, int]:
    raw = text[start:end]
    stripped = raw.lstrip()
    return stripped.rstrip(), offset + start + len(raw) - len(stripped)


def split_relations(text: str) -> List[Tuple[str, int]]:
    """
    Split a whole field into its comma-separated relation groups.

    Args:
        text: Raw field value

    Returns:
        List of (group text, offset) in written order

    Raises:
        ParseError: EMPTY_RELATION if the field or any group is blank
    """
    groups = _split_top_level(text, ",", 0)
    for group, offset in groups:
        if not group:
            raise ParseError(ParseErrorKind.EMPTY_RELATION, "Empty relation", offset, text)
    return groups


def split_possibilities(group: str, offset: int = 0, source: Optional[str] = None) -> List[Tuple[str, int]]:
    """
    Split one relation group into its `|` alternatives.

    Raises:
        ParseError: EMPTY_POSSIBILITY if any alternative is blank
    """
    source = group if source is None else source
    alternatives = _split_top_level(group, "|", offset)
    for alternative, alt_offset in alternatives:
        if not alternative:
            raise ParseError(ParseErrorKind.EMPTY_POSSIBILITY, "Empty alternative", alt_offset, source)
    return alternatives


class _PossibilityScanner:
    """Left-to-right scanner over a single alternative."""

    def __init__(self, text: str, offset: int, source: str):
        self.text = text
        self.offset = offset
        self.source = source
        self.pos = 0

    def _peek(self) -> str:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return ""

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _read_until(self, stops: str) -> str:
        start = self.pos
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char.isspace() or char in stops:
                break
            self.pos += 1
        return self.text[start:self.pos]

    def _error(self, kind: ParseErrorKind, message: str, pos: Optional[int] = None) -> ParseError:
        if pos is None:
            pos = self.pos
        return ParseError(kind, message, self.offset + pos, self.source)

    def _arch(self, token: str, kind: ParseErrorKind, pos: int) -> Arch:
        try:
            return Arch.from_token(token)
        except ValueError:
            raise self._error(kind, f"Empty part in architecture {token!r}", pos) from None

    def parse(self) -> Possibility:
        if self.text.startswith("${"):
            possi = self._parse_substvar()
        else:
            possi = self._parse_package()

        self._skip_whitespace()
        if not self._at_end():
            raise self._error(
                ParseErrorKind.TRAILING_INPUT,
                f"Unexpected text {self.text[self.pos:]!r} after {possi.name!r}",
            )
        return possi

    def _parse_substvar(self) -> Possibility:
        start = self.pos
        close = self.text.find("}", start + 2)
        if close == -1:
            raise self._error(ParseErrorKind.MALFORMED_SUBSTVAR, "Unterminated substitution variable", start)

        name = self.text[start + 2:close]
        if not name:
            raise self._error(ParseErrorKind.EMPTY_NAME, "Empty substitution variable", start)
        if any(char.isspace() for char in name):
            raise self._error(ParseErrorKind.MALFORMED_SUBSTVAR, "Whitespace inside substitution variable", start)

        self.pos = close + 1
        return Possibility(name=name, substvar=True)

    def _parse_package(self) -> Possibility:
        name = self._read_until(_NAME_STOP)
        if not name:
            raise self._error(ParseErrorKind.EMPTY_NAME, "Missing package name")

        arch = None
        if self._peek() == ":":
            self.pos += 1
            qualifier_start = self.pos
            qualifier = self._read_until(_NAME_STOP)
            if not qualifier:
                raise self._error(ParseErrorKind.MALFORMED_MULTIARCH, f"Empty multiarch qualifier on {name!r}")
            arch = self._arch(qualifier, ParseErrorKind.MALFORMED_MULTIARCH, qualifier_start)

        version = None
        architectures = None
        while True:
            self._skip_whitespace()
            char = self._peek()
            if char == "(":
                if version is not None:
                    raise self._error(ParseErrorKind.DUPLICATE_VERSION, f"Second version clause on {name!r}")
                version = self._parse_version()
            elif char == "[":
                if architectures is not None:
                    raise self._error(
                        ParseErrorKind.DUPLICATE_ARCHITECTURE, f"Second architecture clause on {name!r}"
                    )
                architectures = self._parse_architectures()
            else:
                break

        return Possibility(name=name, arch=arch, version=version, architectures=architectures)

    def _read_operator(self) -> Optional[VersionOperator]:
        for operator in _OPERATOR_TABLE:
            if self.text.startswith(operator.value, self.pos):
                self.pos += len(operator.value)
                return operator
        return None

    def _parse_version(self) -> Version:
        self.pos += 1
        self._skip_whitespace()

        operator = self._read_operator()
        if operator is None:
            raise self._error(ParseErrorKind.MALFORMED_VERSION, "Expected one of >=, <=, >>, <<, =")

        self._skip_whitespace()
        number = self._read_until(_NUMBER_STOP)
        if not number:
            raise self._error(ParseErrorKind.MALFORMED_VERSION, "Missing version number")

        self._skip_whitespace()
        if self._peek() != ")":
            raise self._error(ParseErrorKind.MALFORMED_VERSION, "Expected ')' to close version clause")
        self.pos += 1
        return Version(operator=operator, number=number)

    def _parse_architectures(self) -> ArchRestriction:
        start = self.pos
        self.pos += 1
        negated = None
        arches = []

        while True:
            self._skip_whitespace()
            if self._at_end():
                raise self._error(ParseErrorKind.UNTERMINATED_ARCHITECTURE, "Missing ']'", start)
            if self._peek() == "]":
                self.pos += 1
                break

            entry_start = self.pos
            bang = self._peek() == "!"
            if bang:
                self.pos += 1
            token = self._read_until(_ARCH_STOP)
            if not token:
                raise self._error(ParseErrorKind.MALFORMED_ARCHITECTURE, "Expected an architecture name")

            char = self._peek()
            if char and char != "]" and char in _ARCH_STOP:
                raise self._error(
                    ParseErrorKind.MALFORMED_ARCHITECTURE, "Architectures must be separated by whitespace"
                )

            if negated is None:
                negated = bang
            elif bang != negated:
                raise self._error(
                    ParseErrorKind.MIXED_ARCH_NEGATION, "Cannot mix negated and plain architectures", entry_start
                )
            arches.append(self._arch(token, ParseErrorKind.MALFORMED_ARCHITECTURE, entry_start))

        if not arches:
            raise self._error(ParseErrorKind.UNTERMINATED_ARCHITECTURE, "Empty architecture list", start)
        return ArchRestriction(negated=negated, architectures=tuple(arches))


def parse_possibility(text: str, offset: int = 0, source: Optional[str] = None) -> Possibility:
    """
    Parse a single alternative such as `foo:amd64 (>= 1.0) [!hurd-i386]`.

    Args:
        text: The alternative, already stripped
        offset: Where `text` starts within `source` (for error positions)
        source: Whole field text (defaults to `text`)

    Returns:
        Possibility

    Raises:
        ParseError: On the first malformed construct
    """
    source = text if source is None else source
    return _PossibilityScanner(text, offset, source).parse()


def parse(text: str) -> Dependency:
    """
    Parse a relationship field value into a Dependency tree.

    Args:
        text: Field value without the field name, continuation lines
              already unfolded

    Returns:
        Dependency with one Relation per comma-separated group

    Raises:
        ParseError: If the field is malformed anywhere
    """
    logger.debug("Parsing relationship field: %r", text)
    relations = []
    for group, group_offset in split_relations(text):
        possibilities = [
            parse_possibility(alternative, offset, text)
            for alternative, offset in split_possibilities(group, group_offset, text)
        ]
        relations.append(Relation(possibilities=tuple(possibilities)))
    return Dependency(relations=tuple(relations))


__all__ = [
    "parse",
    "parse_possibility",
    "split_relations",
    "split_possibilities",
    "ParseError",
    "ParseErrorKind",
]
