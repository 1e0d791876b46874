"""Simple in-memory store for generation sessions."""

from __future__ import annotations

from typing import Dict, Optional

from services.gemini.config import GeminiSettings
from services.generation_session import GenerationSessionController


class SessionStore:
	"""Create, look up and tear down generation sessions."""

	def __init__(self, http_client, settings: Optional[GeminiSettings] = None) -> None:
		self.http_client = http_client
		self.settings = settings or GeminiSettings()
		self._sessions: Dict[str, GenerationSessionController] = {}

	def create(self) -> GenerationSessionController:
		"""Create a new session sharing the store's HTTP client and settings."""
		session = GenerationSessionController(self.http_client, settings=self.settings)
		self._sessions[session.session_id] = session
		return session

	def get(self, session_id: str) -> GenerationSessionController:
		"""Return a session or raise KeyError if missing."""
		session = self._sessions.get(session_id)
		if session is None:
			raise KeyError(f"Session {session_id} not found")
		return session

	def discard(self, session_id: str) -> None:
		"""Close and forget a session; raises KeyError if missing."""
		session = self.get(session_id)
		session.close()
		del self._sessions[session_id]

	def __len__(self) -> int:
		return len(self._sessions)
