"""Local filesystem-based node configuration state adapter."""

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from nodejoin.interfaces.node_state import ConfigurationStateProvider

logger = logging.getLogger(__name__)

ENROLLMENT_DIR = "enrollment"
BOOTSTRAP_FILE = "bootstrap.json"
CERTS_DIR = "certs"


class LocalNodeConfiguration(ConfigurationStateProvider):
    """ConfigurationStateProvider backed by the node's configuration directory.

    A node counts as configured once ``<config_dir>/enrollment/bootstrap.json``
    exists, or when a ``certs/`` directory was already set up by some other
    means.
    """

    def __init__(self, config_dir: str | os.PathLike[str]) -> None:
        self._root = Path(config_dir)

    @property
    def bootstrap_path(self) -> Path:
        """Location of the persisted bootstrap configuration."""
        return self._root / ENROLLMENT_DIR / BOOTSTRAP_FILE

    def is_auto_configured(self) -> bool:
        configured = self.bootstrap_path.is_file() or (self._root / CERTS_DIR).is_dir()
        logger.debug("Node configuration at %s: configured=%s", self._root, configured)
        return configured

    def apply(self, bootstrap: Mapping[str, Any]) -> None:
        dest = self.bootstrap_path
        dest.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(dict(bootstrap), indent=2, sort_keys=True)

        with tempfile.NamedTemporaryFile(
            "w", dir=dest.parent, delete=False, encoding="utf-8", suffix=".tmp"
        ) as tmp:  # pragma: no mutate
            tmp_path = Path(tmp.name)
            try:
                tmp.write(payload)
            except BaseException:
                tmp.close()
                tmp_path.unlink(missing_ok=True)
                raise

        # atomic move: readers see either no file or the complete document
        try:
            os.replace(tmp_path, dest)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.info("Stored bootstrap configuration at %s", dest)
