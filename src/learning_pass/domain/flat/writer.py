"""Flat document output.

``write_flat`` persists a ``FlatRecord`` or, without a path, hands the text to
the log. Write failures come back as a failed ``FlatWriteResult``; the record
itself is untouched and can be written again.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from learning_pass.domain.flat.serializer import FlatRecord
from learning_pass.utils.logging import REDACTED_VALUE, get_logger

logger = get_logger(__name__)

PIN_LINE_PREFIX = ".USER_PIN."


@dataclass(frozen=True)
class FlatWriteResult:
    success: bool
    path: Optional[Path] = None
    error: Optional[str] = None


def _redacted(text: str) -> str:
    lines = [
        f"{PIN_LINE_PREFIX}   |a{REDACTED_VALUE}" if line.startswith(PIN_LINE_PREFIX) else line
        for line in text.splitlines()
    ]
    return "\n".join(lines)


def write_flat(
    record: FlatRecord,
    path: Union[str, Path, None] = None,
    overwrite: bool = True,
) -> FlatWriteResult:
    """
    Write ``record`` to ``path``.

    Args:
        record: serialized customer
        path: target file; its directory must already exist. ``None`` logs the
            document instead.
        overwrite: replace an existing file; ``False`` fails when it exists

    Returns:
        FlatWriteResult describing the outcome
    """
    text = record.stringify()
    if not text:
        logger.warning("flat.write_skipped", reason="empty record", errors=record.errors)
        return FlatWriteResult(success=False, error="Flat record has no data to write.")

    if path is None:
        logger.info("flat.document", document=_redacted(text))
        return FlatWriteResult(success=True)

    target = Path(path)
    if not target.parent.is_dir():
        logger.error("flat.write_failed", path=str(target), reason="missing directory")
        return FlatWriteResult(success=False, path=target, error=f"Directory does not exist: {target.parent}")

    mode = "w" if overwrite else "x"
    try:
        with target.open(mode, encoding="utf-8", newline="\n") as handle:
            handle.write(text)
    except FileExistsError:
        logger.error("flat.write_failed", path=str(target), reason="file exists")
        return FlatWriteResult(success=False, path=target, error=f"File already exists: {target}")
    except OSError as exc:
        logger.error("flat.write_failed", path=str(target), reason=str(exc))
        return FlatWriteResult(success=False, path=target, error=str(exc))

    logger.info("flat.written", path=str(target), lines=len(record.lines))
    return FlatWriteResult(success=True, path=target)
