"""Create the unique and lookup indexes on the configured database.

Usage:
    python -m backend.ensure_indexes
"""
import sys

from pymongo.errors import PyMongoError

from backend.core import config
from backend.database import close_store, get_store


def main() -> None:
    store = get_store()
    try:
        store.ensure_indexes()
    except PyMongoError as exc:
        print(f'Index creation failed: {exc}', file=sys.stderr)
        sys.exit(1)
    finally:
        close_store()
    print(f'Indexes ready on database {config.DATABASE_NAME!r}')


if __name__ == '__main__':
    main()
