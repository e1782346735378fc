"""Import policy for the qrdine layers.

The domain package must stay free of frameworks, drivers and SDKs, and must
never reach outward into the application, api or infrastructure packages.
"""

from __future__ import annotations

import argparse
import ast
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

FORBIDDEN_MODULES = frozenset(
    {
        "fastapi",
        "starlette",
        "pydantic",
        "sqlalchemy",
        "alembic",
        "psycopg",
        "redis",
        "stripe",
        "itsdangerous",
        "httpx",
        "requests",
        "opentelemetry",
        "prometheus_client",
        "qrdine.api",
        "qrdine.application",
        "qrdine.infrastructure",
        "qrdine.tools",
    }
)

DEFAULT_DOMAIN_PATH = Path(__file__).resolve().parents[1] / "src" / "qrdine" / "domain"


@dataclass(frozen=True)
class Violation:
    file_path: Path
    line: int
    module: str

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line} -> {self.module}"


def is_forbidden(module: str) -> bool:
    parts = module.split(".")
    return any(".".join(parts[:depth]) in FORBIDDEN_MODULES for depth in range(1, len(parts) + 1))


def _imported_modules(tree: ast.AST) -> Iterator[tuple[int, str]]:
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            yield node.lineno, node.module


def scan_file(file_path: Path) -> list[Violation]:
    tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
    return [
        Violation(file_path=file_path, line=line, module=module)
        for line, module in _imported_modules(tree)
        if is_forbidden(module)
    ]


def find_violations(paths: Sequence[Path]) -> list[Violation]:
    violations: list[Violation] = []
    for path in paths:
        files = [path] if path.is_file() else sorted(path.rglob("*.py"))
        for file_path in files:
            violations.extend(scan_file(file_path))
    return sorted(violations, key=lambda item: (str(item.file_path), item.line))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--path",
        action="append",
        type=Path,
        default=[],
        help="File or directory to scan (repeatable). Defaults to src/qrdine/domain.",
    )
    args = parser.parse_args(argv)

    violations = find_violations(args.path or [DEFAULT_DOMAIN_PATH])
    if not violations:
        print("depcheck passed")
        return 0

    print(f"depcheck failed: {len(violations)} forbidden import(s)")
    for violation in violations:
        print(violation)
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
