"""
Data loading and preprocessing module.
Turns raw collection records (remote JSON or bundled JSONL) into Character objects
and decides which characters are good enough to be quizzed on.
"""

# Standard libs for JSON parsing, typing, and paths
import json  # read JSON lines
from typing import Any, Dict, Iterable, List, Optional  # type hints
from pathlib import Path  # filesystem-safe paths

from pydantic import ValidationError  # raised when a record does not fit the schema

# Import our data classes and wire schemas
from .models import Character, CollectionPage  # structured records
from .schemas import CharacterRecord, CollectionResponse  # JSON validation
from . import config  # quality threshold and bundled categories

# Console logging
from loguru import logger  # console logger


def popularity_score(character: Character) -> int:
	"""Sum of the sizes of every membership list."""
	return (
		len(character.films) +
		len(character.short_films) +
		len(character.tv_shows) +
		len(character.video_games) +
		len(character.park_attractions) +
		len(character.allies) +
		len(character.enemies)
	)


def is_valid_character(character: Character) -> bool:
	"""A character is quiz-worthy when it has a portrait, a film, and enough appearances."""
	return bool(
		character.image_url
		and len(character.films) > 0
		and popularity_score(character) >= config.MIN_POPULARITY_SCORE
	)


def filter_valid(characters: Iterable[Character]) -> List[Character]:
	"""Keep only valid characters, preserving their order."""
	return [c for c in characters if is_valid_character(c)]


class CharacterLoader:
	"""
	Handles parsing of collection payloads and loading of bundled categories.
	"""

	def __init__(self, bundled_categories: Optional[Dict[str, Path]] = None):
		"""Initialize the loader; bundled categories default to the packaged ones."""
		self.bundled_categories = dict(config.BUNDLED_CATEGORIES if bundled_categories is None else bundled_categories)
		self._bundled_cache: Dict[str, List[Character]] = {}  # category -> parsed characters

	def parse_character(self, data: Dict[str, Any]) -> Character:
		"""
		Convert a raw dictionary into an immutable Character.
		Raises pydantic.ValidationError when required fields are missing or malformed.
		"""
		record = CharacterRecord.model_validate(data)  # validate and coerce
		return Character(
			id=record.id,
			name=record.name.strip(),  # names occasionally carry stray whitespace
			image_url=record.image_url or '',  # missing portrait becomes empty (fails the gate)
			films=tuple(record.films),
			short_films=tuple(record.short_films),
			tv_shows=tuple(record.tv_shows),
			video_games=tuple(record.video_games),
			park_attractions=tuple(record.park_attractions),
			allies=tuple(record.allies),
			enemies=tuple(record.enemies),
			source_url=record.source_url,
			url=record.url,
		)

	def parse_page(self, payload: Dict[str, Any]) -> CollectionPage:
		"""
		Convert one collection response into a CollectionPage.
		`data` may be a single record or a list; a single record becomes a one-element list.
		Records that do not fit the schema are skipped.
		"""
		response = CollectionResponse.model_validate(payload)  # validate envelope
		raw_records = response.data if isinstance(response.data, list) else [response.data]  # normalize shape

		characters: List[Character] = []  # accumulator for parsed characters
		for position, raw in enumerate(raw_records):
			if not isinstance(raw, dict):  # null or scalar entries in the data list
				logger.warning(f"[Loader] Skipping non-object record at position {position}: {type(raw).__name__}")
				continue
			try:
				characters.append(self.parse_character(raw))
			except ValidationError as e:
				logger.warning(f"[Loader] Skipping malformed record at position {position}: {e.error_count()} error(s)")
				continue

		return CollectionPage(
			characters=characters,
			total_pages=response.info.total_pages,
			count=response.info.count,
			previous_page=response.info.previous_page,
			next_page=response.info.next_page,
		)

	def load_characters_from_jsonl(self, filepath: str) -> List[Character]:
		"""
		Load characters from a JSON Lines file where each line is one record.
		Returns a list of Character objects.
		"""
		characters = []  # accumulator for parsed characters
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Character data file not found: {filepath}")

		logger.info(f"[Loader] Loading characters from {filepath}...")

		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				if not line.strip():  # tolerate blank lines
					continue
				try:
					characters.append(self.parse_character(json.loads(line)))
				except json.JSONDecodeError as e:
					logger.warning(f"[Loader] Skipping invalid JSON at line {line_num}: {e}")
					continue
				except ValidationError as e:
					logger.warning(f"[Loader] Skipping malformed record at line {line_num}: {e.error_count()} error(s)")
					continue

		logger.info(f"[Loader] Successfully loaded {len(characters)} characters.")
		return characters

	def is_bundled(self, category: str) -> bool:
		"""True when the category is served from bundled data."""
		return category in self.bundled_categories

	def load_bundled(self, category: str) -> Optional[List[Character]]:
		"""Return the bundled characters for a category, or None if it is not bundled."""
		if category not in self.bundled_categories:
			return None
		if category not in self._bundled_cache:  # parse each file once
			self._bundled_cache[category] = self.load_characters_from_jsonl(str(self.bundled_categories[category]))
		return list(self._bundled_cache[category])  # copy so callers cannot mutate the cache
