import argparse
import logging
import sys
from typing import Optional, Sequence

from .cli.menu import LedgerMenu
from .core.config import get_settings
from .core.db import create_engine_for_url, init_db
from .core.dependencies import get_ledger_service
from .core.errors import StorageError


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="bankbook", description=settings.app_name)
    parser.add_argument("--database-url", default=settings.database_url)
    parser.add_argument("--log-level", default=settings.log_level)
    parser.add_argument("--log-file", default=settings.log_file)
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        filename=args.log_file or None,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = create_engine_for_url(args.database_url, busy_timeout=settings.sqlite_busy_timeout)
    try:
        init_db(engine)
    except StorageError as exc:
        print(f"DB error: {exc}", file=sys.stderr)
        engine.dispose()
        return 1

    logger.info("app.started", extra={"database_url": args.database_url})
    try:
        LedgerMenu(get_ledger_service(engine)).run()
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
