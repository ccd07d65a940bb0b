from __future__ import annotations
from pathlib import Path
from typing import List
import logging

logger = logging.getLogger(__name__)

DEFAULT_ENCODINGS = ["utf-8-sig", "utf-8", "cp1252"]


def read_text_auto(path: str | Path, encodings: List[str] | None = None) -> str:
    """
    Read a whole text file using the first encoding in the priority list that decodes it.

    Falls back to latin-1, which accepts any byte sequence.

    :param path: File to read.
    :param encodings: Encodings to try, in order.
    :return: The decoded text.
    """
    data = Path(path).read_bytes()
    for enc in encodings or DEFAULT_ENCODINGS:
        try:
            return data.decode(enc)
        except LookupError:
            logger.warning("Unknown encoding %r, skipping", enc)
        except UnicodeDecodeError:
            logger.debug("%s is not valid %s", path, enc)
    return data.decode("latin-1")
