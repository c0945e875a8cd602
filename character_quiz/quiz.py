"""
Quiz orchestration module.
Sequences the sampler and the matcher into rounds and keeps an in-memory score board.
"""

from dataclasses import dataclass  # lightweight containers for results
from typing import Optional  # optional values

from loguru import logger  # console logging

from .models import Character, MatchVerdict  # core data classes
from .name_matching import verify  # answer verification
from .sampler import CharacterSampler  # character sampling
from . import config  # default threshold


@dataclass
class RoundResult:
	character: Character  # who was shown
	transcript: str  # what the player said
	verdict: MatchVerdict  # how it was judged

	@property
	def outcome(self) -> str:
		return "correct" if self.verdict.is_match else "incorrect"


@dataclass
class ScoreBoard:
	score: int = 0  # correct answers
	total_attempts: int = 0  # answered rounds (skips are not attempts)


class QuizGame:
	"""
	One play session: current character, last round result, and score.
	Nothing is persisted; a new QuizGame starts from zero.
	"""

	def __init__(self, sampler: CharacterSampler, threshold: Optional[float] = None):
		self.sampler = sampler
		self.threshold = config.MATCH_THRESHOLD if threshold is None else threshold
		self.category = ''  # '' plays with every character
		self.character: Optional[Character] = None
		self.result: Optional[RoundResult] = None
		self.board = ScoreBoard()

	async def next_character(self, category: Optional[str] = None) -> Optional[Character]:
		"""
		Start a new round. `category` defaults to the one currently selected.
		Returns None (and keeps the current round) when the request was superseded.
		"""
		if category is not None:
			self.category = category
		picked = await self.sampler.fetch_next(self.category)
		if picked is None:
			return None
		self.character = picked
		self.result = None
		logger.info(f"[Quiz] New round: character #{picked.id}")
		return picked

	async def skip(self) -> Optional[Character]:
		"""Move on without answering; skips do not count as attempts."""
		return await self.next_character()

	def submit_answer(self, transcript: str) -> RoundResult:
		"""Judge a transcript against the current character and update the score."""
		if self.character is None:
			raise ValueError("No character to answer for; call next_character() first")
		if self.result is not None:
			raise ValueError("This round was already answered")

		verdict = verify(transcript, self.character.name, self.threshold)
		self.board.total_attempts += 1
		if verdict.is_match:
			self.board.score += 1
		self.result = RoundResult(character=self.character, transcript=transcript, verdict=verdict)
		logger.info(
			f"[Quiz] '{transcript}' for '{self.character.name}' -> {self.result.outcome} "
			f"(confidence={verdict.confidence:.2f}, score={self.board.score}/{self.board.total_attempts})"
		)
		return self.result
