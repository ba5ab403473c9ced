import asyncio
from pathlib import Path
from typing import Union

from loguru import logger

from .base_source import BaseSource, DataSourceError


class FileSource(BaseSource):
    """Reads the match sheet from a local CSV file."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self.location = str(self.path)
        self.encoding = encoding

    async def fetch_text(self) -> str:
        logger.debug(f"Reading match data from {self.path}")
        try:
            text = await asyncio.to_thread(self.path.read_text, encoding=self.encoding)
        except OSError as e:
            logger.error(f"Could not read match data file {self.path}: {e}")
            raise DataSourceError(f"Match data file unavailable: {self.path}") from e
        logger.info(f"Read {len(text)} characters of match data from {self.path}")
        return text
