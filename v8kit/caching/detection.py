"""
sccache detection.

sccache is used as GN's ``cc_wrapper`` when available. It is an optimization
only; the build proceeds without it.

Usage:
    from v8kit.caching.detection import SccacheDetector

    detector = SccacheDetector(settings)
    sccache = detector.detect()
    if sccache:
        print(f"Using sccache at {sccache}")
"""

import logging
import shutil
from pathlib import Path
from typing import Callable, Optional

from ..core.config import Settings

logger = logging.getLogger(__name__)

NOT_USING_SCCACHE = "Not using sccache"


class SccacheDetector:
    """
    Locate sccache.

    Search order:
    1. SCCACHE variable (taken as-is, not checked for existence)
    2. ``sccache`` on PATH
    """

    def __init__(
        self,
        settings: Settings,
        which: Callable[[str], Optional[str]] = shutil.which,
    ):
        """
        Initialize detector.

        Args:
            settings: Resolved settings
            which: PATH lookup, replaceable in tests
        """
        self.settings = settings
        self.which = which

    def detect(self) -> Optional[Path]:
        """
        Detect sccache.

        Returns:
            Path to sccache executable, or None if not found
        """
        explicit = self.settings.sccache
        if explicit is not None:
            logger.info(f"Using sccache from SCCACHE: {explicit}")
            return explicit

        found = self.which("sccache")
        if found:
            logger.info(f"Found sccache on PATH: {found}")
            return Path(found)

        logger.warning(NOT_USING_SCCACHE)
        return None
