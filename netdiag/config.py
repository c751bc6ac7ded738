"""
netdiag Configuration

Centralized configuration, read from the environment.
"""

import logging
import os
from typing import Optional

# =============================================================================
# Runbook Catalog
# =============================================================================

# Extra directory of site-specific runbooks, loaded after the bundled catalog
RUNBOOK_DIR = os.environ.get("NETDIAG_RUNBOOK_DIR", "") or None


# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.environ.get("NETDIAG_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> int:
    """
    Configure root logging.

    Args:
        level: Level name (DEBUG, INFO, ...); defaults to LOG_LEVEL

    Returns:
        The numeric level applied (unknown names fall back to INFO)
    """
    name = (level or LOG_LEVEL).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric)
    return numeric


if __name__ == "__main__":
    print("netdiag Configuration")
    print("=" * 50)
    print(f"Runbook dir: {RUNBOOK_DIR or '(bundled only)'}")
    print(f"Log level: {LOG_LEVEL}")
