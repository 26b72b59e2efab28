#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Content-addressed naming for rendered diagrams.

A diagram's artifact name depends only on its source text, so rendering the
same source twice (in one run or across runs) targets the same file, and a
digest recorded in a document can be compared with the current source to
detect edits.
"""

from __future__ import annotations

import hashlib
import hmac
from pathlib import PurePosixPath
from typing import Optional

from mdmermaid.constants import DEFAULT_DIAGRAM_FORMAT, DIGEST_KEY

_KEY = DIGEST_KEY.encode("utf-8")


def content_digest(source: str) -> str:
    """Return the 40-character lowercase hex HMAC-SHA1 digest of ``source``.

    Examples
    --------
        >>> len(content_digest("graph TD; A-->B"))
        40

    """
    return hmac.new(_KEY, source.encode("utf-8"), hashlib.sha1).hexdigest()


def artifact_name(source: str, fmt: str = DEFAULT_DIAGRAM_FORMAT) -> str:
    """Return ``"<digest>.<fmt>"`` for ``source``."""
    return f"{content_digest(source)}.{fmt}"


def artifact_reference(source: str, fmt: str = DEFAULT_DIAGRAM_FORMAT, image_dir: Optional[str] = None) -> str:
    """Return the relative POSIX path a document uses to reference a rendering.

    Parameters
    ----------
    source : str
        Diagram source text
    fmt : str, default "svg"
        Image format extension
    image_dir : str or None
        Folder (relative to the destination) the image lives in

    Returns
    -------
    str
        ``"<image_dir>/<digest>.<fmt>"``, or ``"<digest>.<fmt>"`` without an
        image folder

    """
    name = artifact_name(source, fmt)
    if not image_dir:
        return name
    folder = PurePosixPath(image_dir.replace("\\", "/"))
    if str(folder) in ("", "."):
        return name
    return str(folder / name)
