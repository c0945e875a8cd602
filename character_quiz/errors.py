"""
Exception types raised by the Character Quiz.
Domain errors carry a message that can be shown to players as-is.
"""

from typing import Optional


class QuizError(Exception):
	"""Base class for every error the quiz surfaces to its caller."""


class TransportError(QuizError):
	"""The collection source could not be reached or answered with a non-2xx status."""

	def __init__(self, message: str, status: Optional[int] = None):
		super().__init__(message)
		self.status = status  # HTTP status when the server answered, None for network failures


class SamplingError(QuizError):
	"""No character could be produced; the player may simply try again."""


class NoCharactersFoundError(SamplingError):
	def __init__(self, category: str):
		super().__init__("No characters found for this category.")
		self.category = category


class CharacterNotFoundError(SamplingError):
	def __init__(self, attempts: int):
		super().__init__("Could not find a valid character. Try again.")
		self.attempts = attempts


class SamplingCancelled(Exception):
	"""
	Raised inside a sampling sequence whose request was superseded.
	Never surfaced to players: the sampler turns it into a silent None.
	"""
