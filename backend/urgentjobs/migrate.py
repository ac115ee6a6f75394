"""Apply pending schema migrations: ``urgentjobs-migrate [--db PATH]``."""
import argparse
import logging
from pathlib import Path

from urgentjobs.config import settings
from urgentjobs.database import SCHEMA_VERSION, init_db

logger = logging.getLogger("urgentjobs.migrate")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create or upgrade the Urgent Jobs database.")
    parser.add_argument("--db", type=Path, default=settings.database_path, help="SQLite database file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    version = init_db(args.db)
    logger.info("%s is at schema version %d (latest %d)", args.db, version, SCHEMA_VERSION)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
