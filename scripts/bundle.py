#!/usr/bin/env python3
"""
Copy the relay's Lambda handlers and shared layer into deployment directories,
as described by bundles.toml.
"""

import argparse
import fnmatch
import os
import shutil
import sys
import tomllib
from pathlib import Path

BUNDLE_CONFIG_FILE = "bundles.toml"

# Patterns to ignore during bundling
IGNORE_PATTERNS = [
    "__pycache__",
    "*.pyc",
    ".pytest_cache",
    ".DS_Store",
    "test",
]


class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"


def colored_print(text: str, color: str = Colors.RESET) -> None:
    """Print text with color."""
    print(f"{color}{text}{Colors.RESET}")


def should_ignore(name: str) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in IGNORE_PATTERNS)


def copy_source(source: Path, dest: Path) -> int:
    """Copy a file, or a directory's contents, into dest. Returns the number of files copied."""
    if not source.exists():
        colored_print(f"  Warning: Source path does not exist: {source}", Colors.RED)
        return 0

    if source.is_file():
        shutil.copy2(source, dest / source.name)
        colored_print(f"  Copied file: {source.name}", Colors.GREEN)
        return 1

    copied = 0
    for item in sorted(source.iterdir()):
        if should_ignore(item.name):
            colored_print(f"  Skipped (ignored): {item.name}", Colors.YELLOW)
            continue
        if item.is_dir():
            shutil.copytree(
                item,
                dest / item.name,
                dirs_exist_ok=True,
                ignore=lambda _, files: [f for f in files if should_ignore(f)],
            )
            copied += sum(len(files) for _, _, files in os.walk(dest / item.name))
            colored_print(f"  Copied directory: {item.name}", Colors.GREEN)
        else:
            shutil.copy2(item, dest / item.name)
            copied += 1
            colored_print(f"  Copied file: {item.name}", Colors.GREEN)
    return copied


def main():
    parser = argparse.ArgumentParser(description="Bundle Lambda sources for deployment")
    parser.add_argument("--config", default=BUNDLE_CONFIG_FILE, help="Bundle configuration file")
    args = parser.parse_args()

    config_path = Path(args.config)
    if not config_path.exists():
        colored_print(f"Error: Configuration file '{config_path}' not found!", Colors.RED)
        return 1

    with open(config_path, "rb") as f:
        config = tomllib.load(f)

    bundles = config.get("bundles", [])
    if not bundles:
        colored_print("No bundles found in configuration file.", Colors.YELLOW)
        return 0

    target_dir = Path(config.get("target_directory", "bundle"))
    colored_print(
        f"Bundling {len(bundles)} target(s) into {target_dir}\n", Colors.BOLD + Colors.CYAN
    )

    total_files = 0
    for i, bundle in enumerate(bundles, 1):
        dest = target_dir / bundle["dest"]
        dest.mkdir(parents=True, exist_ok=True)
        colored_print(f"[{i}/{len(bundles)}] Bundling to {dest}:", Colors.BOLD)

        for source in bundle["sources"]:
            total_files += copy_source(Path(source), dest)

    colored_print(
        f"\nBundling complete! Total files bundled: {total_files}", Colors.BOLD + Colors.GREEN
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
