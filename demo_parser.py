"""
Demo: Parse a realistic Build-Depends field, print the report and export it.
"""

from debdep.parser import parse, ParseError
from debdep.analyzer import analyze_dependency
from debdep.cli import format_report
from debdep.serialization import dependency_to_yaml


BUILD_DEPENDS = """debhelper-compat (= 13),
 dh-python,
 python3-all:any,
 python3-yaml,
 libssl-dev [linux-any] | libressl-dev [!linux-any],
 ${misc:Pre-Depends}"""

BROKEN = [
    "foo bar",
    "foo (>= 1.0) (<= 2.0)",
    "foo [arch !foo]",
    "foo [amd64",
]


if __name__ == "__main__":
    dep = parse(BUILD_DEPENDS)

    print()
    print("=" * 70)
    print("BUILD-DEPENDS REPORT")
    print("=" * 70)
    print(format_report(analyze_dependency(dep)))
    print()

    print("REJECTED INPUT")
    for text in BROKEN:
        try:
            parse(text)
        except ParseError as e:
            print(f"  {text!r:28} {e.kind.value}: {e}")
    print()

    with open("build_depends_output.yaml", "w") as f:
        f.write(dependency_to_yaml(dep))
    print("Tree exported to build_depends_output.yaml")
