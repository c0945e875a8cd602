"""
HTTP transport for the remote character collection.
Fetches single pages with aiohttp and converts them into CollectionPage objects.
"""

import asyncio  # timeout errors surface as asyncio.TimeoutError
from typing import Any, Dict, Optional  # type hints

# aiohttp performs the non-blocking GET requests; cancelling the awaiting task aborts the request
import aiohttp  # async HTTP client
from pydantic import ValidationError  # envelope did not match the expected schema

from .data_loader import CharacterLoader  # payload -> CollectionPage
from .errors import TransportError  # uniform failure type for callers
from .models import CollectionPage  # structured page
from . import config  # endpoint and timeout defaults

from loguru import logger  # console logger


class CollectionClient:
	"""
	Reads pages from the collection endpoint.
	Use as an async context manager, or pass an existing aiohttp session that you close yourself.
	"""

	def __init__(
		self,
		base_url: Optional[str] = None,  # defaults to config.COLLECTION_API_URL
		timeout: Optional[float] = None,  # seconds, defaults to config.REQUEST_TIMEOUT
		session: Optional[aiohttp.ClientSession] = None,  # shared session (not closed by us)
		loader: Optional[CharacterLoader] = None,  # payload parser
	):
		self.base_url = base_url or config.COLLECTION_API_URL
		self.timeout = aiohttp.ClientTimeout(total=timeout if timeout is not None else config.REQUEST_TIMEOUT)
		self.loader = loader or CharacterLoader()
		self._session = session
		self._owns_session = session is None  # only close sessions we created

	async def __aenter__(self) -> 'CollectionClient':
		if self._session is None:
			self._session = aiohttp.ClientSession(timeout=self.timeout)
		return self

	async def __aexit__(self, exc_type, exc, tb):
		await self.close()

	async def close(self):
		"""Close the underlying HTTP session if this client created it."""
		if self._owns_session and self._session is not None:
			await self._session.close()
			self._session = None

	def build_params(self, category: str, page: int, page_size: int) -> Dict[str, str]:
		"""Query parameters for one page request; `films` is only sent for a category."""
		params = {}
		if category:
			params['films'] = category
		params['page'] = str(page)
		params['pageSize'] = str(page_size)
		return params

	async def fetch_page(self, category: str, page: int, page_size: int) -> CollectionPage:
		"""
		Fetch and parse one page.
		Raises TransportError on connection failures, timeouts, non-2xx statuses and undecodable bodies.
		"""
		if self._session is None:
			raise RuntimeError("CollectionClient is not open; use 'async with CollectionClient()'")

		params = self.build_params(category, page, page_size)
		logger.debug(f"[Client] GET {self.base_url} params={params}")

		try:
			async with self._session.get(self.base_url, params=params, timeout=self.timeout) as response:
				if not 200 <= response.status < 300:
					raise TransportError(f"API error: {response.status}", status=response.status)
				payload: Any = await response.json(content_type=None)  # some deployments mislabel JSON
		except aiohttp.ClientError as e:
			logger.warning(f"[Client] Request for page {page} failed: {e}")
			raise TransportError(f"Failed to reach the character collection: {e}") from e
		except asyncio.TimeoutError as e:
			logger.warning(f"[Client] Request for page {page} timed out after {self.timeout.total}s")
			raise TransportError("The character collection did not answer in time.") from e
		except ValueError as e:  # JSON decoding errors
			raise TransportError(f"The character collection returned invalid JSON: {e}") from e

		if not isinstance(payload, dict):
			raise TransportError("The character collection returned an unexpected payload.")
		try:
			result = self.loader.parse_page(payload)
		except ValidationError as e:
			raise TransportError(f"The character collection returned an unexpected payload: {e.error_count()} error(s)") from e

		logger.debug(f"[Client] Page {page}/{result.total_pages} -> {len(result.characters)} characters")
		return result
