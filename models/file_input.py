"""File inputs accepted by the image intake manager.

Anything exposing `filename`, `size`, `content_type` and an awaitable
`read()` can be ingested, which includes FastAPI's `UploadFile`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import aiofiles


class FileInput(Protocol):
	filename: Optional[str]
	size: Optional[int]
	content_type: Optional[str]

	async def read(self) -> bytes: ...


@dataclass
class BytesFileInput:
	"""File input backed by bytes already held in memory."""

	filename: str
	data: bytes
	content_type: Optional[str] = None

	@property
	def size(self) -> int:
		return len(self.data)

	async def read(self) -> bytes:
		return self.data


class LocalFileInput:
	"""File input read from disk with aiofiles."""

	def __init__(self, path: str | Path, content_type: Optional[str] = None) -> None:
		self.path = Path(path)
		self.filename = self.path.name
		self.content_type = content_type

	@property
	def size(self) -> Optional[int]:
		try:
			return os.path.getsize(self.path)
		except OSError:
			return None

	async def read(self) -> bytes:
		async with aiofiles.open(self.path, "rb") as f:
			return await f.read()
