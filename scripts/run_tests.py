"""Run the compass-config test suite.

The package and its ``test`` extra are installed in editable mode first when
they cannot be imported. Anything after ``--`` is handed to pytest unchanged.
"""

from __future__ import annotations

import argparse
import importlib.util
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
REQUIRED_MODULES = ("pytest", "typer", "pydantic", "compass_config")


def missing_modules() -> list[str]:
    return [name for name in REQUIRED_MODULES if importlib.util.find_spec(name) is None]


def install_package(missing: list[str]) -> None:
    print(f"missing {', '.join(missing)}; installing compass-config[test]", file=sys.stderr)
    command = [sys.executable, "-m", "pip", "install", "--quiet", "-e", ".[test]"]
    subprocess.run(command, cwd=ROOT, check=True)


def parse_args(argv: list[str]) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--no-install", action="store_true", help="Fail instead of installing dependencies")
    if "--" in argv:
        split = argv.index("--")
        return parser.parse_args(argv[:split]), argv[split + 1 :]
    return parser.parse_args(argv), []


def main(argv: list[str]) -> int:
    args, pytest_args = parse_args(argv)
    missing = missing_modules()
    if missing:
        if args.no_install:
            print(f"missing modules: {', '.join(missing)}", file=sys.stderr)
            return 1
        try:
            install_package(missing)
        except subprocess.CalledProcessError as exc:
            raise SystemExit(f"Failed to install test dependencies: {exc}") from exc
    return subprocess.run([sys.executable, "-m", "pytest", "tests", *pytest_args], cwd=ROOT).returncode


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
