"""
preview.py
- Purpose: Local preview of a selected image as a data URI.
- Design: No network. Failure only degrades the preview; it never blocks
  selection or upload.
"""

import asyncio
import base64
import logging

from app.uploads.types import CandidateFile

logger = logging.getLogger("app.preview")


def encode_data_uri(file: CandidateFile) -> str:
    mime = file.content_type or "application/octet-stream"
    b64 = base64.b64encode(file.data).decode("ascii")
    return f"data:{mime};base64,{b64}"


async def generate_preview(file: CandidateFile) -> str | None:
    try:
        return await asyncio.to_thread(encode_data_uri, file)
    except Exception:
        logger.warning("preview.failed", exc_info=True, extra={"file_name": file.filename})
        return None
