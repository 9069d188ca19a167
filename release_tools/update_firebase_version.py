"""Push the version in version.json to Firestore (settings/appVersion).

Credentials come from FIREBASE_CREDENTIALS, the path of a service-account
JSON file.
"""
from __future__ import annotations

import argparse
import datetime
import json
import logging
import os
import pathlib
from typing import Any, Sequence

import firebase_admin
from firebase_admin import credentials, firestore

logger = logging.getLogger(__name__)

COLLECTION = "settings"
DOCUMENT = "appVersion"


def get_client(credentials_path: str | None = None):
    path = credentials_path or os.getenv("FIREBASE_CREDENTIALS")
    if not path:
        raise RuntimeError("FIREBASE_CREDENTIALS is not set")
    if not firebase_admin._apps:
        firebase_admin.initialize_app(credentials.Certificate(path))
    return firestore.client()


def read_version(path: pathlib.Path) -> str:
    data = json.loads(path.read_text(encoding="utf-8"))
    version = data.get("version")
    if not version:
        raise ValueError(f"{path} has no version")
    return str(version)


def push_version(db: Any, version: str) -> dict:
    payload = {
        "version": version,
        "updatedAt": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }
    db.collection(COLLECTION).document(DOCUMENT).set(payload)
    return payload


def main(argv: Sequence[str] | None = None, db: Any = None) -> int:
    parser = argparse.ArgumentParser(description="Sync version.json to Firestore.")
    parser.add_argument("--version-file", default="version.json", help="Path of version.json.")
    parser.add_argument("--credentials", default=None, help="Service-account JSON (defaults to FIREBASE_CREDENTIALS).")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    try:
        version = read_version(pathlib.Path(args.version_file))
        client = db if db is not None else get_client(args.credentials)
        push_version(client, version)
    except Exception as exc:  # firebase raises a wide range of transport errors
        logger.error("Firebase version update failed: %s", exc)
        return 1
    logger.info("Firebase version updated to %s", version)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
