from __future__ import annotations

from dataclasses import dataclass

"""Config dataclass for the form filling tool.

Defaults applied by the loader live here as module constants so the CLI and
the tests agree on them.
"""

DEFAULT_STORE_PATH = ".formfill/store.json"
DEFAULT_HISTORY_LIMIT = 100
DEFAULT_LOG_DIR = "logs"


@dataclass(frozen=True)
class FormFillConfig:
    """Root configuration object.

    ``data_file`` may be None. ``--data`` always wins over it, and without
    either the CLI uses the data source remembered in the mapping store.
    """
    template_file: str  # Fillable document template (PDF)
    data_file: str | None = None  # Tabular source (.csv / .xlsx / .xls)
    store_path: str = DEFAULT_STORE_PATH  # JSON mapping store
    history_limit: int = DEFAULT_HISTORY_LIMIT  # Fill history entries kept
    log_dir: str = DEFAULT_LOG_DIR  # Validation log directory
