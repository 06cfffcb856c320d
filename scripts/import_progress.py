#!/usr/bin/env python3
"""Import corrections and vocabulary from a progress export into the flashcard store.

Reads the JSON progress document kept by the tutor app and creates cards for
every correction and vocabulary item that does not have one yet. Running the
import twice on the same file adds nothing the second time.

Usage:
    python scripts/import_progress.py path/to/progress.json
    python scripts/import_progress.py path/to/progress.json --db my_cards.db
"""

import argparse
import json
import sys
from pathlib import Path

# Add repo root to path so we can import project modules
REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT))


def load_progress(path: Path) -> dict:
    """Read the progress export, which must be a JSON object."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return data


def run_import(path: Path, db_path: Path) -> int:
    """Ingest the progress file. Returns the number of cards created."""
    from portuguese.database import count_cards, ingest_sources, init_db, load_cards
    from portuguese.db_engine import use_sqlite_file
    from portuguese.stats import get_flashcard_stats

    use_sqlite_file(db_path)
    init_db()

    progress = load_progress(path)
    corrections = progress.get("corrections", [])
    vocabulary = progress.get("vocabulary", [])
    print(f"Read {len(corrections)} corrections and {len(vocabulary)} vocabulary items from {path.name}")

    result = ingest_sources(corrections, vocabulary)

    print(f"Created {len(result.cards)} new cards ({count_cards()} total in {db_path})")
    for error in result.errors:
        print(f"  Skipped {error.source_type.value} #{error.index}: {error.message}")

    stats = get_flashcard_stats(load_cards())
    print(f"Due today: {stats.due_today}, learning: {stats.learning}, mastered: {stats.mastered}")
    return len(result.cards)


def main():
    parser = argparse.ArgumentParser(
        description="Create flashcards from a progress export (corrections + vocabulary)"
    )
    parser.add_argument("progress", type=Path, help="Path to the progress JSON file")
    parser.add_argument(
        "--db",
        type=Path,
        default=REPO_ROOT / "portuguese_flashcards.db",
        help="SQLite database file (default: portuguese_flashcards.db)",
    )

    args = parser.parse_args()

    if not args.progress.exists():
        print(f"Error: {args.progress} not found", file=sys.stderr)
        sys.exit(1)

    try:
        run_import(args.progress, args.db)
    except (ValueError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
