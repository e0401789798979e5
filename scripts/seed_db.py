"""Seed the board allow-list and the staff directory.

Usage:
    python scripts/seed_db.py --allowed allowed.csv --staff staff.csv

allowed.csv: one column ``email``.
staff.csv:   columns ``identifier,displayName[,ward]``.
"""
from __future__ import annotations

import argparse
import csv
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.ward_board.ward_board.container import build_container
from src.ward_board.ward_board.core.constants import ALLOWED_USERS_COLLECTION, STAFF_COLLECTION


def _rows(path: Path) -> list[dict]:
    with path.open(newline="", encoding="utf-8-sig") as fh:
        return [row for row in csv.DictReader(fh)]


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--allowed", type=Path, help="CSV of allowed board accounts")
    parser.add_argument("--staff", type=Path, help="CSV of staff directory entries")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    store = build_container(db_config=dict(settings.DB_CONFIG)).store

    allowed = staff = 0
    if args.allowed:
        for row in _rows(args.allowed):
            email = (row.get("email") or "").strip()
            if email:
                store.put(ALLOWED_USERS_COLLECTION, email, {"email": email})
                allowed += 1
    if args.staff:
        for row in _rows(args.staff):
            identifier = (row.get("identifier") or "").strip()
            if identifier:
                store.put(
                    STAFF_COLLECTION,
                    identifier,
                    {"displayName": (row.get("displayName") or identifier).strip(), "ward": (row.get("ward") or "").strip()},
                )
                staff += 1

    print(f"OK: Seeded allowedUsers={allowed} staff={staff}")


if __name__ == "__main__":
    main()
