"""Single entry point for the garden sustainability tools.

Usage::

    python -m scripts <command> [args]

Every module in this package with a ``main`` function is a command; the
module name with hyphens is the command name.
"""

from __future__ import annotations

import argparse
import ast
import pkgutil
import runpy
import sys
from pathlib import Path
from typing import Dict, NamedTuple

PACKAGE_DIR = Path(__file__).resolve().parent
_SKIP = {"cli", "__init__", "__main__"}


class Command(NamedTuple):
    module: str
    summary: str


def _summary(path: Path) -> str:
    try:
        doc = ast.get_docstring(ast.parse(path.read_text(encoding="utf-8")))
    except (OSError, SyntaxError):
        return ""
    return doc.strip().splitlines()[0] if doc else ""


def discover_commands() -> Dict[str, Command]:
    """Return command names mapped to their module and one line summary."""
    commands: Dict[str, Command] = {}
    for mod in pkgutil.iter_modules([str(PACKAGE_DIR)]):
        if mod.ispkg or mod.name in _SKIP or mod.name.startswith("_"):
            continue
        commands[mod.name.replace("_", "-")] = Command(
            f"scripts.{mod.name}", _summary(PACKAGE_DIR / f"{mod.name}.py")
        )
    return dict(sorted(commands.items()))


def main(argv: list[str] | None = None) -> None:
    commands = discover_commands()
    width = max((len(name) for name in commands), default=0)
    epilog = "\n".join(f"  {name:<{width}}  {cmd.summary}" for name, cmd in commands.items())
    parser = argparse.ArgumentParser(
        description="Irish garden sustainability utilities",
        epilog=f"commands:\n{epilog}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", choices=list(commands), metavar="command")
    parser.add_argument("args", nargs=argparse.REMAINDER)
    ns = parser.parse_args(argv)

    module_name = commands[ns.command].module
    sys.argv = [module_name] + ns.args
    runpy.run_module(module_name, run_name="__main__", alter_sys=True)


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
