"""
Character sampling module.
Produces a random, valid, non-repeating character from the paginated remote
collection (or a bundled category), one request at a time.

Session state is an immutable SamplingSession: the functions below take a session
and hand back an updated one, and only CharacterSampler decides when an updated
session replaces the live one. A newer fetch_next() call cancels the older one's
token, which aborts its page requests and keeps its results from being committed.
"""

import asyncio  # cooperative scheduling, concurrent page fetches
import random  # uniform selection of pages and characters
from typing import Awaitable, Callable, List, Optional, Sequence, Set, Tuple  # type annotations

from loguru import logger  # console logging

from .data_loader import CharacterLoader, filter_valid  # bundled categories and the quality gate
from .errors import CharacterNotFoundError, NoCharactersFoundError, QuizError, SamplingCancelled
from .models import Character, CollectionPage, SamplingSession  # structured state
from . import config  # page sizes and retry budget

# Anything with this signature can serve pages: (category, page, page_size) -> CollectionPage
PageFetcher = Callable[[str, int, int], Awaitable[CollectionPage]]


class CancellationToken:
	"""
	Cancellation handle for one fetch_next() call.
	Page fetches run through guard() so that cancel() also aborts them mid-flight.
	"""

	def __init__(self):
		self._cancelled = False
		self._tasks: Set[asyncio.Task] = set()  # in-flight fetches started under this token

	@property
	def cancelled(self) -> bool:
		return self._cancelled

	def cancel(self):
		"""Mark the token cancelled and abort every fetch still running under it."""
		self._cancelled = True
		for task in list(self._tasks):
			task.cancel()

	def raise_if_cancelled(self):
		if self._cancelled:
			raise SamplingCancelled()

	async def guard(self, func: PageFetcher, *args) -> CollectionPage:
		"""
		Run one fetch under this token.
		Raises SamplingCancelled if the token is (or becomes) cancelled, whatever the fetch did.
		"""
		self.raise_if_cancelled()
		task = asyncio.ensure_future(func(*args))
		self._tasks.add(task)
		try:
			result = await task
		except asyncio.CancelledError:
			if self._cancelled:
				raise SamplingCancelled() from None
			raise
		except Exception as e:
			if self._cancelled:  # failures of a superseded request are not reported
				raise SamplingCancelled() from e
			raise
		finally:
			self._tasks.discard(task)
		self.raise_if_cancelled()  # result arrived after supersession: drop it
		return result


def pick_different(pool: Sequence[Character], last_id: Optional[int], rng: random.Random) -> Optional[Character]:
	"""
	Uniformly pick a character, avoiding `last_id` whenever the pool allows it.
	Returns None for an empty pool.
	"""
	if not pool:
		return None
	if len(pool) == 1:
		return pool[0]
	others = [c for c in pool if c.id != last_id]
	return rng.choice(others if others else list(pool))


async def _fetch_remaining_pages(
	fetch_page: PageFetcher,
	token: CancellationToken,
	category: str,
	pages: Sequence[int],
	page_size: int,
) -> List[CollectionPage]:
	"""Fetch `pages` concurrently; the first failure cancels the rest and propagates."""
	tasks = [asyncio.ensure_future(token.guard(fetch_page, category, p, page_size)) for p in pages]
	try:
		return await asyncio.gather(*tasks)
	except BaseException:
		for task in tasks:
			task.cancel()
		raise


async def build_pool(
	category: str,
	fetch_page: PageFetcher,
	token: CancellationToken,
	loader: CharacterLoader,
) -> Tuple[Character, ...]:
	"""
	Materialize every valid character of a category.
	Bundled categories are used as shipped, without any network call.
	"""
	bundled = loader.load_bundled(category)
	if bundled is not None:
		logger.info(f"[Sampler] Using {len(bundled)} bundled characters for '{category}'")
		return tuple(bundled)

	first = await token.guard(fetch_page, category, 1, config.FILTERED_PAGE_SIZE)
	pool: List[Character] = filter_valid(first.characters)
	if first.total_pages > 1:
		remaining = range(2, first.total_pages + 1)
		logger.debug(f"[Sampler] Fetching {len(remaining)} more pages for '{category}' concurrently")
		pages = await _fetch_remaining_pages(fetch_page, token, category, remaining, config.FILTERED_PAGE_SIZE)
		for page in pages:
			pool.extend(filter_valid(page.characters))

	logger.info(f"[Sampler] Built pool for '{category}': {len(pool)} valid characters over {first.total_pages} page(s)")
	return tuple(pool)


async def prepare_session(
	session: SamplingSession,
	fetch_page: PageFetcher,
	token: CancellationToken,
	loader: CharacterLoader,
) -> SamplingSession:
	"""
	Make sure the session holds what selection needs: a pool (filtered) or a page count (unfiltered).
	Already-prepared sessions are returned unchanged, without any fetch.
	"""
	if session.filter:
		if session.pool:  # an empty pool is rebuilt on the next request
			return session
		pool = await build_pool(session.filter, fetch_page, token, loader)
		return SamplingSession(filter=session.filter, pool=pool, last_id=session.last_id)

	if session.total_pages is not None:
		return session
	first = await token.guard(fetch_page, '', 1, config.PAGE_SIZE)
	logger.info(f"[Sampler] Collection has {first.total_pages} page(s) of {config.PAGE_SIZE}")
	return SamplingSession(total_pages=first.total_pages, last_id=session.last_id)


def pick_from_pool(session: SamplingSession, rng: random.Random) -> Tuple[Character, SamplingSession]:
	"""Select from a prepared filtered session. Raises NoCharactersFoundError for an empty pool."""
	picked = pick_different(session.pool or (), session.last_id, rng)
	if picked is None:
		raise NoCharactersFoundError(session.filter)
	return picked, SamplingSession(filter=session.filter, pool=session.pool, last_id=picked.id)


async def pick_from_random_pages(
	session: SamplingSession,
	fetch_page: PageFetcher,
	token: CancellationToken,
	rng: random.Random,
	max_attempts: Optional[int] = None,
) -> Tuple[Character, SamplingSession]:
	"""
	Select from random pages of a prepared unfiltered session.
	Pages without a valid character are retried up to `max_attempts` times; transport errors are not.
	"""
	if max_attempts is None:
		max_attempts = config.MAX_PAGE_ATTEMPTS
	total_pages = max(1, session.total_pages or 1)

	for attempt in range(1, max_attempts + 1):
		page_number = rng.randint(1, total_pages)
		page = await token.guard(fetch_page, '', page_number, config.PAGE_SIZE)
		picked = pick_different(filter_valid(page.characters), session.last_id, rng)
		if picked is not None:
			logger.debug(f"[Sampler] Picked '{picked.name}' from page {page_number} (attempt {attempt})")
			return picked, SamplingSession(total_pages=session.total_pages, last_id=picked.id)
		logger.debug(f"[Sampler] Page {page_number} had no valid characters (attempt {attempt}/{max_attempts})")

	raise CharacterNotFoundError(max_attempts)


class CharacterSampler:
	"""
	Stateful front end of the sampling engine.
	Holds the live SamplingSession and makes sure only the latest request commits to it.
	"""

	def __init__(
		self,
		fetch_page: PageFetcher,  # transport, e.g. CollectionClient.fetch_page
		loader: Optional[CharacterLoader] = None,  # bundled categories
		rng: Optional[random.Random] = None,  # inject a seeded Random for reproducible runs
	):
		self.fetch_page = fetch_page
		self.loader = loader or CharacterLoader()
		self.rng = rng or random.Random()
		self._session = SamplingSession()
		self._token: Optional[CancellationToken] = None

	@property
	def session(self) -> SamplingSession:
		return self._session

	def cancel(self):
		"""Abort the in-flight request, if any, without starting a new one."""
		if self._token is not None:
			self._token.cancel()

	def _commit(self, token: CancellationToken, session: SamplingSession) -> bool:
		"""Replace the live session, but only on behalf of the most recent request."""
		if token is not self._token or token.cancelled:
			return False
		self._session = session
		return True

	async def fetch_next(self, category: Optional[str] = None) -> Optional[Character]:
		"""
		Return the next character for `category` ('' or None means all characters).
		Supersedes any call still in flight; a superseded call returns None.
		Raises TransportError or SamplingError (user-facing message) on failure.
		"""
		category = (category or '').strip()

		self.cancel()  # older request must never write state
		token = CancellationToken()
		self._token = token

		if category != self._session.filter:
			logger.info(f"[Sampler] Filter changed '{self._session.filter}' -> '{category}', starting a new session")
			self._session = SamplingSession(filter=category)
		session = self._session

		try:
			prepared = await prepare_session(session, self.fetch_page, token, self.loader)
			try:
				if prepared.filter:
					picked, updated = pick_from_pool(prepared, self.rng)
				else:
					picked, updated = await pick_from_random_pages(prepared, self.fetch_page, token, self.rng)
			except QuizError:
				self._commit(token, prepared)  # keep the learned pool or page count for the retry
				raise
		except SamplingCancelled:
			logger.debug(f"[Sampler] Request for '{category or 'all'}' was superseded; result discarded")
			return None

		if not self._commit(token, updated):
			return None
		return picked
