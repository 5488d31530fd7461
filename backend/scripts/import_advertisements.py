"""Import advertisements for a user from a ``;``-delimited file.

The file is deleted once processed. Rejected rows are printed to stdout with
a ``motivo`` column, ready to be fixed and imported again.

Usage:
    cd backend
    python -m scripts.import_advertisements anuncios.csv 42 > rejeitados.csv
"""

import argparse
import asyncio
import logging
import sys

from bureauto.core.errors import ParseError
from bureauto.core.logging_config import setup_logging
from bureauto.db.session import async_session_factory, engine
from bureauto.services.importer import import_advertisements

logger = logging.getLogger(__name__)


async def run(file_path: str, user_id: int) -> str:
    try:
        async with async_session_factory() as db:
            return await import_advertisements(db, file_path, user_id)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("file_path", help="path of the ;-delimited file")
    parser.add_argument("user_id", type=int, help="owner of the imported advertisements")
    args = parser.parse_args(argv)

    # stdout carries the rejected rows
    setup_logging(logging.WARNING, stream=sys.stderr)
    try:
        rejected = asyncio.run(run(args.file_path, args.user_id))
    except OSError as exc:
        logger.error("Cannot read %s: %s", args.file_path, exc)
        return 1
    except ParseError as exc:
        logger.error("Cannot parse %s: %s", args.file_path, exc)
        return 1

    if rejected:
        sys.stdout.write(rejected + "\n")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
