from __future__ import annotations

import argparse
import json
from typing import Any

from app.modules.flashcards.attachments import AttachmentKind, load_attachment
from app.modules.flashcards.exceptions import AttachmentTypeError
from app.modules.flashcards.main import FlashcardsService
from app.modules.flashcards.results import MutationResult


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def _emit_result(result: MutationResult) -> int:
    if not result.ok:
        _emit({"ok": False, "error": result.error})
        return 1
    value = result.value
    if hasattr(value, "model_dump"):
        value = FlashcardsService.to_jsonable(value)
    _emit({"ok": True, "value": value})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flashlearner", description="Flashcards study deck CLI"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("categories", help="List categories")

    c = sub.add_parser("cards", help="List flashcards")
    c.add_argument("--category", help="Only cards in this category id")

    ac = sub.add_parser("add-category", help="Create a category")
    ac.add_argument("name")

    rc = sub.add_parser("rename-category", help="Rename a category")
    rc.add_argument("id")
    rc.add_argument("name")

    dc = sub.add_parser(
        "delete-category", help="Delete a category and all of its flashcards"
    )
    dc.add_argument("id")
    dc.add_argument("--yes", action="store_true", help="Confirm the deletion")

    af = sub.add_parser("add-card", help="Create a flashcard")
    af.add_argument("--category", required=True, help="Category id")
    af.add_argument("--question", "-q", required=True)
    af.add_argument("--answer", "-a", default="")
    af.add_argument("--image", help="Path to an image for the answer")
    af.add_argument("--pdf", help="Path to a PDF for the answer")

    ef = sub.add_parser("edit-card", help="Change fields of a flashcard")
    ef.add_argument("id")
    ef.add_argument("--category", help="Move the card to this category id")
    ef.add_argument("--question", "-q")
    ef.add_argument("--answer", "-a")
    ef.add_argument("--image", help="Path to a replacement answer image")
    ef.add_argument("--pdf", help="Path to a replacement answer PDF")

    df = sub.add_parser("delete-card", help="Delete a flashcard")
    df.add_argument("id")
    df.add_argument("--yes", action="store_true", help="Confirm the deletion")

    sub.add_parser("sync", help="Import a fresh AI-generated batch")
    return parser


def main(argv: list[str] | None = None, service: FlashcardsService | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    svc = service or FlashcardsService.from_engine()
    repo = svc.repository

    if args.cmd == "categories":
        _emit(
            {
                "active_category_id": repo.active_category_id,
                "categories": [svc.to_jsonable(c) for c in repo.categories],
            }
        )
        return 0
    if args.cmd == "cards":
        cards = repo.list_by_category(args.category) if args.category else repo.flashcards
        _emit([svc.to_jsonable(f) for f in cards])
        return 0
    if args.cmd == "add-category":
        return _emit_result(repo.add_category(args.name))
    if args.cmd == "rename-category":
        return _emit_result(repo.rename_category(args.id, args.name))
    if args.cmd in ("delete-category", "delete-card"):
        if not args.yes:
            parser.error(f"{args.cmd} requires --yes to confirm")
        if args.cmd == "delete-category":
            return _emit_result(repo.delete_category(args.id))
        return _emit_result(repo.delete_flashcard(args.id))
    if args.cmd == "add-card":
        try:
            image = load_attachment(args.image, AttachmentKind.IMAGE) if args.image else None
            pdf = load_attachment(args.pdf, AttachmentKind.PDF) if args.pdf else None
        except (AttachmentTypeError, OSError) as e:
            _emit({"ok": False, "error": str(e)})
            return 1
        return _emit_result(
            repo.add_flashcard(args.category, args.question, args.answer, image, pdf)
        )
    if args.cmd == "edit-card":
        fields = {
            name: value
            for name, value in (
                ("category_id", args.category),
                ("question", args.question),
                ("answer", args.answer),
            )
            if value is not None
        }
        try:
            if args.image:
                fields["answer_image"] = load_attachment(args.image, AttachmentKind.IMAGE)
            if args.pdf:
                fields["answer_pdf"] = load_attachment(args.pdf, AttachmentKind.PDF)
        except (AttachmentTypeError, OSError) as e:
            _emit({"ok": False, "error": str(e)})
            return 1
        if not fields:
            parser.error("edit-card needs at least one field to change")
        return _emit_result(repo.update_flashcard(args.id, **fields))
    if args.cmd == "sync":
        report = svc.sync_blocking()
        _emit(
            {
                "status": report.status.value,
                "imported": report.imported,
                "skipped": report.skipped,
                "categories_created": report.categories_created,
                "active_category_id": report.active_category_id,
                "message": report.message,
            }
        )
        return 0 if report.ok else 1

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
