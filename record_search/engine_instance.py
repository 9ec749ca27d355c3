"""Global search engine instance and loaded record collection."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import get_settings
from .core.engine import SearchEngine

settings = get_settings()

# Global search engine instance
search_engine = SearchEngine(
    fuzzy_threshold=settings.fuzzy_threshold,
    max_results=settings.max_results,
    enable_phonetic=settings.enable_phonetic,
    regex_timeout_ms=settings.regex_timeout_ms,
    parallel_strategies=settings.parallel_strategies,
    highlight_tag=settings.highlight_tag,
)

# Record collection served by the API when a request carries no records
records: List[Dict[str, Any]] = []


def load_records(path: Optional[str] = None) -> int:
    """
    Replace the loaded collection with the records in a JSON file.

    The file must hold a JSON array of objects.

    Returns:
        Number of records loaded
    """
    file_path = Path(path) if path else Path(__file__).parent / "sample_records.json"
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"{file_path} must contain a JSON array of records")

    records[:] = [item for item in data if isinstance(item, dict)]
    return len(records)
