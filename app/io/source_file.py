"""Sequence files handed to the uploader.

A SourceFile is either backed by a path on disk (streamed in chunks when it is
stored) or by bytes already in memory.
"""

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional, Union

CHUNK_SIZE = 1024 * 1024  # 1 MB


@dataclass(frozen=True)
class SourceFile:
    filename: str
    size_bytes: int
    path: Optional[Path] = None
    data: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SourceFile":
        path = Path(path)
        return cls(filename=path.name, size_bytes=os.path.getsize(path), path=path)

    @classmethod
    def from_bytes(cls, filename: str, data: bytes) -> "SourceFile":
        return cls(filename=filename, size_bytes=len(data), data=data)

    async def iter_chunks(self, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Yield the file's bytes in order."""
        if self.data is not None:
            for start in range(0, len(self.data), chunk_size):
                yield self.data[start:start + chunk_size]
            return
        if self.path is None:
            raise ValueError(f"SourceFile '{self.filename}' has neither a path nor data")
        with open(self.path, "rb") as src:
            while True:
                chunk = await asyncio.to_thread(src.read, chunk_size)
                if not chunk:
                    break
                yield chunk
