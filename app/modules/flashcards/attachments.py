"""Answer attachments stored inline as base64 data URLs.

Images and PDFs are embedded in the flashcard itself rather than referenced
by path, so a stored collection is self-contained.
"""

from __future__ import annotations

import asyncio
import base64
import enum
import mimetypes
from pathlib import Path
from typing import Optional

from app.modules.flashcards.exceptions import AttachmentTypeError

PDF_MAGIC = b"%PDF-"


class AttachmentKind(enum.Enum):
    IMAGE = "image"
    PDF = "pdf"


def _guess_mime(filename: str) -> Optional[str]:
    mime, _ = mimetypes.guess_type(filename)
    return mime


def _resolve_mime(data: bytes, filename: str, kind: AttachmentKind) -> str:
    mime = _guess_mime(filename)
    if kind is AttachmentKind.PDF:
        if mime == "application/pdf" or data.startswith(PDF_MAGIC):
            return "application/pdf"
        raise AttachmentTypeError(f"{filename!r} is not a PDF document")
    if mime and mime.startswith("image/"):
        return mime
    raise AttachmentTypeError(f"{filename!r} is not an image")


def encode_attachment(data: bytes, filename: str, kind: AttachmentKind) -> str:
    """Return ``data:<mime>;base64,<payload>`` for a selected file."""
    mime = _resolve_mime(data, filename, kind)
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{payload}"


def load_attachment(path: str | Path, kind: AttachmentKind) -> str:
    p = Path(path)
    return encode_attachment(p.read_bytes(), p.name, kind)


async def load_attachment_async(path: str | Path, kind: AttachmentKind) -> str:
    return await asyncio.to_thread(load_attachment, path, kind)


def is_attachment(value: str, kind: AttachmentKind) -> bool:
    """Check that a stored payload is a base64 data URL of the given kind."""
    if not value.startswith("data:") or ";base64," not in value:
        return False
    mime = value[len("data:") : value.index(";base64,")]
    if kind is AttachmentKind.PDF:
        return mime == "application/pdf"
    return mime.startswith("image/")
