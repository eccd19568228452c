"""Quick storage inspector for the study deck.

Reads the durable slots directly and summarizes categories, per-category
card counts, attachments, and cards whose category no longer exists.

Usage:
  uv run scripts/inspect_flashcards.py
"""

from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path

# Ensure project root is on sys.path so `app` package imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.core.config import settings
from app.core.db.base import engine
from app.modules.flashcards.store import FlashcardStore, SqlKeyValueStore


def main() -> int:
    backend = SqlKeyValueStore(engine)
    store = FlashcardStore(backend)

    print(f"Storage: {settings.storage.url}")
    for key in (store.categories_key, store.flashcards_key, settings.storage.user_key):
        raw = backend.get(key)
        state = "missing (seed on load)" if raw is None else f"{len(raw)} bytes"
        print(f"- {key}: {state}")

    categories = store.load_categories()
    flashcards = store.load_flashcards()
    per_category = Counter(f.category_id for f in flashcards)
    known = {c.id for c in categories}

    print(f"\nCategories: {len(categories)}  Flashcards: {len(flashcards)}")
    for c in categories:
        print(f"  • {c.id} | {c.name!r} | cards={per_category.get(c.id, 0)}")

    images = sum(1 for f in flashcards if f.answer_image)
    pdfs = sum(1 for f in flashcards if f.answer_pdf)
    print(f"\nAttachments: images={images} pdfs={pdfs}")

    orphans = [f for f in flashcards if f.category_id not in known]
    if orphans:
        print("\nCards bound to missing categories:")
        for f in orphans[:10]:
            print(f"  - {f.id} -> {f.category_id}: {f.question[:80]!r}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
