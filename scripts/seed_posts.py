#!/usr/bin/env python3
"""
Seed the blog store with generated sample posts.

Writes straight through the repository, bypassing the HTTP API.

Usage:
  python scripts/seed_posts.py [--count 10] [--drop] [--database-url sqlite:///./blog.db]
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from apps.blog.repository import PostRepository
from apps.shared.database import Database

FIRST_NAMES = ["Ada", "Grace", "Linus", "Margaret", "Ken", "Barbara", "Guido", "Frances"]
LAST_NAMES = ["Lovelace", "Hopper", "Torvalds", "Hamilton", "Thompson", "Liskov", "Rossum", "Allen"]
WORDS = (
    "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua"
).split()


def _sentence(rng: random.Random, words: int) -> str:
    text = " ".join(rng.choice(WORDS) for _ in range(words))
    return text.capitalize() + "."


def generate_post(rng: random.Random | None = None) -> dict:
    """Build one random creation payload."""
    rng = rng or random.Random()
    return {
        "author": {
            "firstName": rng.choice(FIRST_NAMES),
            "lastName": rng.choice(LAST_NAMES),
        },
        "title": _sentence(rng, rng.randint(3, 8)),
        "content": " ".join(_sentence(rng, rng.randint(6, 14)) for _ in range(rng.randint(2, 5))),
    }


def seed(database: Database, count: int, drop: bool = False, rng: random.Random | None = None) -> int:
    """Optionally drop the store, then insert count generated posts. Returns how many were stored."""
    if drop:
        database.teardown()
    database.init()
    with database.session() as session:
        inserted = PostRepository(session).insert_batch(generate_post(rng) for _ in range(count))
    return len(inserted)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Seed the blog store with sample posts")
    ap.add_argument("--count", type=int, default=10, help="Number of posts to generate (default: 10)")
    ap.add_argument("--drop", action="store_true", help="Drop all tables before seeding")
    ap.add_argument("--database-url", help="Override DATABASE_URL")
    ap.add_argument("--seed", type=int, help="Random seed for reproducible data")
    args = ap.parse_args(argv)

    if args.count < 0:
        raise SystemExit("--count must be zero or positive")

    logging.basicConfig(level=logging.INFO)
    database = Database(args.database_url)
    try:
        stored = seed(database, args.count, drop=args.drop, rng=random.Random(args.seed))
    finally:
        database.dispose()

    print(f"Seeded {stored} of {args.count} posts")
    return 0 if stored == args.count else 1


if __name__ == "__main__":
    sys.exit(main())
