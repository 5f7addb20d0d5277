"""Export helpers for normalized Expert Advisor code."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from .common import DOWNLOAD_FILENAME, DOWNLOAD_MIME_TYPE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportedCode:
    """Download payload for the presentation shell."""
    code: str
    filename: str = DOWNLOAD_FILENAME
    mime_type: str = DOWNLOAD_MIME_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "mimeType": self.mime_type,
            "code": self.code,
        }


def write_expert_advisor(code: str, directory: Union[str, Path]) -> Path:
    """Write normalized code to `<directory>/ExpertAdvisor.mq5`.

    Args:
        code: Normalized source. Never pass highlighted markup here.
        directory: Target directory; created if missing.

    Returns:
        Path of the written file.
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / DOWNLOAD_FILENAME
    path.write_text(code, encoding="utf8")
    logger.info(f"Wrote {len(code)} chars to {path}")
    return path
