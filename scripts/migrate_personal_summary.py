from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from headhuntd.config import build_sqlalchemy_db_url, settings  # noqa: E402
from headhuntd.database import SessionLocal, mask_db_url  # noqa: E402
from headhuntd.services.onboarding import migrate_personal_summaries  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Rewrite legacy string personal summaries as {\"summary\": text} documents."
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Count the users that would be rewritten without writing anything.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    print("migrating personal summaries on:", mask_db_url(build_sqlalchemy_db_url(settings)))

    with SessionLocal() as db:
        count = migrate_personal_summaries(db, dry_run=args.dry_run)

    verb = "would migrate" if args.dry_run else "migrated"
    print(f"{verb} {count} user(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
