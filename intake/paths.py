"""Centralized path constants for the incident intake package.

Every file and directory path the package reads is defined here as a
module-level constant. Other modules import from here instead of building
ad-hoc ``Path(...)`` literals.

Design rules:
  1. This module imports ONLY ``pathlib.Path`` -- no project imports, so it
     is importable at any point without circular-import chains.
  2. No path existence checks at import time. Loaders treat a missing file
     as "use built-in defaults".
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# -- Project Root --
# ---------------------------------------------------------------------------

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
"""Absolute path to the project root directory (one level above ``intake/``)."""

# ---------------------------------------------------------------------------
# -- Config Paths --
# ---------------------------------------------------------------------------

CONFIG_DIR: Path = PROJECT_ROOT / "config"
"""Directory containing intake configuration files."""

INTAKE_CONFIG_PATH: Path = CONFIG_DIR / "intake_config.json"
"""API endpoint, credential env var and timeout settings."""

REFERENCE_DATA_PATH: Path = CONFIG_DIR / "reference_data.json"
"""Optional override for the dropdown vocabularies (barangays, categories, ...)."""
