"""
Command-line front end: parse relationship fields and print the tree.

    debdep "foo (>= 1.0), bar | baz"
    echo "libc6 [amd64]" | debdep -f json
    debdep -f report "foo, foo (<< 2)"
"""

import argparse
import logging
import sys
from typing import List, Optional

from debdep.analyzer import DependencyReport, analyze_dependency
from debdep.parser import ParseError, parse
from debdep.serialization import dependency_to_json, dependency_to_yaml

logger = logging.getLogger(__name__)

FORMATS = ("yaml", "json", "report")


def format_report(report: DependencyReport) -> str:
    """Render a DependencyReport as plain text."""
    lines = [
        f"Relations:              {report.total_relations}",
        f"Possibilities:          {report.total_possibilities}",
        f"With alternatives:      {report.alternative_relations}",
        f"Versioned:              {report.versioned_possibilities}",
        f"Architecture-restricted:{report.restricted_possibilities}",
        f"Multiarch-qualified:    {report.qualified_possibilities}",
        f"Packages:               {', '.join(report.package_names) or '-'}",
        f"Substvars:              {', '.join(report.substvars) or '-'}",
    ]
    if report.warnings:
        lines.append("Warnings:")
        lines.extend(f"  {i}. {warning}" for i, warning in enumerate(report.warnings, 1))
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="debdep",
        description="Parse Debian relationship fields (Depends, Build-Depends, ...)",
    )
    parser.add_argument("fields", nargs="*", metavar="FIELD",
                        help="Field value to parse; read from stdin when omitted")
    parser.add_argument("-f", "--format", choices=FORMATS, default="yaml",
                        help="Output format (default: yaml)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase log verbosity (-v info, -vv debug)")
    return parser


def _render(text: str, fmt: str) -> str:
    dep = parse(text)
    if fmt == "json":
        return dependency_to_json(dep)
    if fmt == "report":
        return format_report(analyze_dependency(dep))
    return dependency_to_yaml(dep).rstrip("\n")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    fields = args.fields or [sys.stdin.read()]
    for text in fields:
        logger.info("Parsing field %r", text)
        try:
            output = _render(text, args.format)
        except ParseError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
