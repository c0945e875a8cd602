"""
Data models for the Character Quiz.
Defines the core data structures shared by the sampler, the matcher and the quiz.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import List, Optional, Tuple  # lists, optional values and fixed, immutable sequences


@dataclass(frozen=True)
class Character:
	"""
	Represents a single character from the remote collection.
	Membership lists are tuples so a Character can never change after it is fetched.
	"""
	id: int  # unique identifier of the character in the collection
	name: str  # display name, also the answer players must say
	image_url: str  # portrait reference (empty when the source has none)
	films: Tuple[str, ...] = ()  # feature films the character appears in
	short_films: Tuple[str, ...] = ()  # short films
	tv_shows: Tuple[str, ...] = ()  # television shows
	video_games: Tuple[str, ...] = ()  # video games
	park_attractions: Tuple[str, ...] = ()  # theme park attractions
	allies: Tuple[str, ...] = ()  # friendly characters
	enemies: Tuple[str, ...] = ()  # opposing characters
	source_url: Optional[str] = None  # optional: wiki page the record was scraped from
	url: Optional[str] = None  # optional: canonical API URL of the record


@dataclass
class CollectionPage:
	"""One page of the remote collection plus its pagination metadata."""
	characters: List[Character]  # characters on this page (always a list, even for single-record payloads)
	total_pages: int  # total number of pages for the query that produced this page
	count: int = 0  # number of records on this page as reported by the source
	previous_page: Optional[str] = None  # URL of the previous page, if any
	next_page: Optional[str] = None  # URL of the next page, if any


@dataclass(frozen=True)
class MatchVerdict:
	"""
	Result of checking a transcript against a character name.
	`tier` names the cascade stage that decided; it is None for a no-match.
	"""
	is_match: bool  # True when the transcript names the target
	confidence: float  # 0..1, strength of the evidence from the deciding tier
	tier: Optional[str] = None  # exact / containment / keyword / whole_distance / word_distance


@dataclass(frozen=True)
class SamplingSession:
	"""
	Sampling state for one active category filter.
	Sampling functions take a session and hand back a new one; a filter change
	simply starts again from an empty session.
	"""
	filter: str = ''  # active category ('' means all characters)
	pool: Optional[Tuple[Character, ...]] = None  # filtered mode: materialized valid characters
	total_pages: Optional[int] = None  # unfiltered mode: lazily learned page count
	last_id: Optional[int] = None  # id of the most recently shown character
