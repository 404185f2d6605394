from __future__ import annotations

import sys
import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

# --- Project root -------------------------------------------------------------

def _project_root() -> Path:
    """
    Works in dev and with PyInstaller-like bundles.
    """
    if getattr(sys, "_MEIPASS", None):  # PyInstaller temp dir
        return Path(sys._MEIPASS)  # type: ignore[attr-defined]
    return Path(__file__).resolve().parents[1]  # scrollbot/ -> [project root]

_ROOT = _project_root()


def project_path(path: Union[str, Path]) -> Path:
    """
    Resolve a config/content path. Absolute paths pass through; relative ones
    are anchored at the project root so the app runs from any cwd.
        project_path("tufti/config/defaults.yaml")
    """
    p = Path(path)
    if p.is_absolute():
        return p
    resolved = _ROOT / p
    if not resolved.exists():
        logger.debug("project path %s does not exist (yet)", resolved)
    return resolved
