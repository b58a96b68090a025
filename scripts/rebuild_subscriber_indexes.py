#!/usr/bin/env python3
"""One-off maintenance: rebuild the subscriber phone/email indexes from primary records.

Walks subscribers:list, loads each record and rewrites subscribers:phone:{phone} and
subscribers:email:{email} to point at it. Use after a partially failed write left an
index missing. Run from repo root with .env (REDIS_URL). Idempotent.
"""
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv  # noqa: E402

from portfolio.domain import StorageError  # noqa: E402
from portfolio.infrastructure import (  # noqa: E402
    KeyValueSubscriberRepository,
    RedisKeyValueStore,
)

load_dotenv(REPO_ROOT / ".env")


def main() -> int:
    url = os.environ.get("REDIS_URL", "redis://localhost:6379/0").strip()
    store = RedisKeyValueStore.from_url(url)
    try:
        count = KeyValueSubscriberRepository(store).rebuild_indexes()
    except StorageError as e:
        print(f"Index rebuild failed: {e}", file=sys.stderr)
        return 1
    finally:
        store.close()
    print(f"Rebuilt indexes for {count} subscriber(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
