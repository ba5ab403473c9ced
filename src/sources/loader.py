from typing import List, Optional

from loguru import logger

from src.models.match import MatchRecord
from src.normalization.normalizer import Normalizer

from .base_source import BaseSource
from .file_source import FileSource
from .http_source import HttpSource


def build_source(
    location: str, token: Optional[str] = None, timeout: float = 30.0
) -> BaseSource:
    """Picks an HTTP source for http(s) URLs and a file source otherwise."""
    if location.lower().startswith(("http://", "https://")):
        return HttpSource(location, token=token, timeout=timeout)
    return FileSource(location)


async def load_records(
    source: BaseSource, normalizer: Optional[Normalizer] = None
) -> List[MatchRecord]:
    """Fetches the sheet and normalizes it. Source errors propagate to the caller."""
    normalizer = normalizer or Normalizer()
    try:
        text = await source.fetch_text()
    finally:
        await source.close()
    records = normalizer.normalize(text)
    logger.info(f"Loaded {len(records)} match records from {source.location}")
    return records
