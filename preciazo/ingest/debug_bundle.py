"""Debug bundle writer for pages that failed extraction."""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from preciazo.config import settings

logger = logging.getLogger(__name__)


class DebugBundleWriter:
    """
    Writes the raw HTML of a failed extraction plus a metadata file.

    Bundles are stored as ``<base>/<retailer>/<timestamp>_<id>/`` so a
    template change can be reproduced offline with ``preciazo parse-file``.
    """

    def __init__(self, base_path: Optional[Union[str, Path]] = None, enabled: Optional[bool] = None):
        """
        Initialize debug bundle writer.

        Args:
            base_path: Base path for bundle storage (defaults to config)
            enabled: Whether bundles are written (defaults to config)
        """
        self.base_path = Path(base_path or settings.debug_dump_path)
        self.enabled = settings.debug_dump_enabled if enabled is None else enabled

    def _get_bundle_dir(self, retailer: str, timestamp: datetime) -> Path:
        timestamp_str = timestamp.strftime("%Y%m%d_%H%M%S_%f")
        return self.base_path / retailer / f"{timestamp_str}_{uuid.uuid4().hex[:8]}"

    def write_bundle(
        self,
        retailer: str,
        html: Union[str, bytes],
        error: Exception,
        url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Path]:
        """
        Write debug bundle for an extraction failure.

        Args:
            retailer: Retailer identifier
            html: Page content that failed to extract
            error: The extraction error
            url: Source URL, if known
            metadata: Optional additional metadata

        Returns:
            Path to bundle directory, or None when bundles are disabled
        """
        if not self.enabled:
            return None

        timestamp = datetime.now(timezone.utc)
        bundle_dir = self._get_bundle_dir(retailer, timestamp)
        bundle_dir.mkdir(parents=True, exist_ok=True)

        html_path = bundle_dir / "page.html"
        if isinstance(html, (bytes, bytearray)):
            html_path.write_bytes(bytes(html))
        else:
            html_path.write_text(html, encoding="utf-8")

        metadata_dict = {
            "retailer": retailer,
            "url": url,
            "error_type": type(error).__name__,
            "error": str(error),
            "timestamp": timestamp.isoformat(),
            **(metadata or {}),
        }

        with open(bundle_dir / "metadata.json", "w", encoding="utf-8") as f:
            json.dump(metadata_dict, f, indent=2, default=str)

        logger.debug(f"Wrote debug bundle to {bundle_dir}")
        return bundle_dir
