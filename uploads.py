from __future__ import annotations
import logging
import os
import re
import time
from typing import Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

import config
import errors

logger = logging.getLogger(__name__)

ALLOWED_TYPES = "jpeg|jpg|png|gif"
_allowed = re.compile(ALLOWED_TYPES)


def is_allowed(filename: str, content_type: Optional[str]) -> bool:
    # extension and declared MIME type must both match
    ext = os.path.splitext(filename)[1].lower()
    return bool(_allowed.search(content_type or "")) and bool(_allowed.search(ext))


def stored_name(filename: str) -> str:
    # Millisecond prefix; same-millisecond uploads of one name overwrite each other
    return f"{int(time.time() * 1000)}-{os.path.basename(filename)}"


def _write(path: str, contents: bytes) -> None:
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    with open(path, "wb") as f:
        f.write(contents)


async def store_image(upload: Optional[UploadFile]) -> str:
    if upload is None or not upload.filename:
        raise errors.UnsupportedType("No image file provided")
    if not is_allowed(upload.filename, upload.content_type):
        raise errors.UnsupportedType(
            f"File upload only supports the following filetypes - {ALLOWED_TYPES}"
        )

    path = f"{config.UPLOAD_DIR.rstrip('/')}/{stored_name(upload.filename)}"
    contents = await upload.read()
    await run_in_threadpool(_write, path, contents)
    logger.info("Stored upload %s (%d bytes)", path, len(contents))
    return path
