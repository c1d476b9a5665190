"""The core package stays a leaf: it never imports the HTTP app layer."""

import ast
from pathlib import Path

import blink

CORE_DIR = Path(blink.__file__).parent / "core"


def _imported_modules(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"))
    modules: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            modules.add(node.module)
    return modules


def test_core_does_not_import_app() -> None:
    offenders = {
        str(path.relative_to(CORE_DIR)): sorted(
            m for m in _imported_modules(path) if m.startswith(("blink.app", "blink.services"))
        )
        for path in CORE_DIR.rglob("*.py")
    }

    assert {k: v for k, v in offenders.items() if v} == {}
