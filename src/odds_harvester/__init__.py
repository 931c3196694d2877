"""Leon odds harvester.

Discovers leagues from static sport pages, fetches events and detailed odds
from the Leon betline API with bounded concurrency and retry, and writes a
flat text report.
"""

from .config import AppSettings, get_settings

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AppSettings",
    "get_settings",
    # Key subpackages
    "models",
    "extractors",
    "io_clients",
    "pipelines",
]
