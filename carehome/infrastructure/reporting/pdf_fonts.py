from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

logger = logging.getLogger(__name__)

_REPORT_FONT_NAME = "CareHomeReport"
# Built into reportlab; covers the ASCII-only compliance report.
FALLBACK_FONT_NAME = "Helvetica"


def _candidate_font_paths() -> list[Path]:
    paths: list[Path] = []
    env_font = os.getenv("CAREHOME_PDF_FONT")
    if env_font:
        paths.append(Path(env_font))
    paths.extend(
        [
            Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
            Path("/usr/share/fonts/dejavu/DejaVuSans.ttf"),
            Path("/usr/share/fonts/truetype/liberation2/LiberationSans-Regular.ttf"),
            Path("C:/Windows/Fonts/arial.ttf"),
            Path("C:/Windows/Fonts/segoeui.ttf"),
        ]
    )
    return paths


@lru_cache(maxsize=1)
def get_report_font_name() -> str:
    if _REPORT_FONT_NAME in pdfmetrics.getRegisteredFontNames():
        return _REPORT_FONT_NAME

    for font_path in _candidate_font_paths():
        if not font_path.exists():
            continue
        try:
            pdfmetrics.registerFont(TTFont(_REPORT_FONT_NAME, str(font_path)))
            return _REPORT_FONT_NAME
        except TTFError:
            logger.warning("Could not register PDF font %s", font_path, exc_info=True)

    return FALLBACK_FONT_NAME
