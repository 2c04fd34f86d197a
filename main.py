"""Main entry point: resolve contextual import requests, optionally after checks."""

import argparse
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from contextual_require.run_resolution import main as run_resolution_main


def run_command(cmd_list: Sequence[str | Path], cwd: Path | str | None = None) -> None:
    """Run a command and exit if it fails."""
    cmd_str = " ".join(str(x) for x in cmd_list)
    print(f"Running: {cmd_str}")
    try:
        subprocess.run(cmd_list, check=True, cwd=cwd)
    except subprocess.CalledProcessError as e:
        print(f"Error executing command: {cmd_str}")
        sys.exit(e.returncode)


def main() -> int:
    """Run development checks if asked, then hand the rest to the resolver CLI."""
    parser = argparse.ArgumentParser(
        description="Resolve contextual import requests against a container tree.",
        add_help=False,
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Run development checks (linting, tests) before resolving",
    )
    args, rest = parser.parse_known_args()

    root_dir = Path(__file__).parent

    if args.dev:
        print("--- Running Development Checks ---")
        run_command([sys.executable, str(root_dir / "dev.py"), "--ci"], cwd=root_dir)
        print("\nDevelopment checks passed. Proceeding with resolution.\n")

    return run_resolution_main(rest)


if __name__ == "__main__":
    raise SystemExit(main())
