"""Bump the app version in version.json (and the rules file, when present).

Usage: python -m release_tools.update_version [patch|minor|major|touch]
"""
from __future__ import annotations

import argparse
import datetime
import json
import logging
import pathlib
import re
from typing import Sequence

logger = logging.getLogger(__name__)

BUMP_KINDS = ("patch", "minor", "major", "touch")
SEGMENTS = ("major", "minor", "patch")
RULES_VERSION = re.compile(r"(현재 버전\s*:\s*)\d+(?:\.\d+)+")


def bump(version: str, kind: str) -> str:
    parts = [int(part) for part in str(version).split(".")]
    while len(parts) < 3:
        parts.append(0)
    if kind in SEGMENTS:
        index = SEGMENTS.index(kind)
        parts = parts[:index] + [parts[index] + 1] + [0] * (len(parts) - index - 1)
    return ".".join(str(part) for part in parts)


def update_rules_file(path: pathlib.Path, version: str) -> bool:
    if not path.exists():
        return False
    text = path.read_text(encoding="utf-8")
    updated, count = RULES_VERSION.subn(lambda m: f"{m.group(1)}{version}", text)
    if count:
        path.write_text(updated, encoding="utf-8")
    return bool(count)


def update_version(version_path: pathlib.Path, kind: str, rules_path: pathlib.Path | None = None) -> dict:
    data = json.loads(version_path.read_text(encoding="utf-8"))
    old = str(data.get("version", "0.0.0"))
    data["version"] = bump(old, kind)
    data["lastUpdated"] = datetime.datetime.now(datetime.timezone.utc).isoformat()
    version_path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    logger.info("version %s -> %s (%s)", old, data["version"], kind)
    if rules_path is not None and kind != "touch" and update_rules_file(rules_path, data["version"]):
        logger.info("updated %s", rules_path)
    return data


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Update version.json.")
    parser.add_argument("kind", nargs="?", default="patch", choices=BUMP_KINDS)
    parser.add_argument("--version-file", default="version.json", help="Path of version.json.")
    parser.add_argument(
        "--rules-file",
        default="RULES.md",
        help="File holding a '현재 버전 : x.y.z' line; skipped when missing.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    try:
        data = update_version(pathlib.Path(args.version_file), args.kind, pathlib.Path(args.rules_file))
    except (OSError, ValueError) as exc:
        logger.error("version update failed: %s", exc)
        return 1
    print(f"version: {data['version']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
