"""
Answer verification module.
Decides whether a (possibly noisy) speech transcript names a target character.

The decision is a cascade of matchers tried in priority order; the first matcher
with an opinion wins.
"""

import re  # regex for normalization
from functools import cached_property  # compute the whole-string similarity at most once
from typing import Callable, List, Optional, Tuple  # type annotations

# rapidfuzz provides a fast classic Levenshtein distance (unit insert/delete/substitute costs)
from rapidfuzz.distance import Levenshtein  # edit distance

from loguru import logger  # console logging

from .models import MatchVerdict  # verdict returned to callers
from . import config  # default acceptance threshold

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")  # anything that is not a lowercase letter, digit or whitespace

EXACT_CONFIDENCE = 1.0
CONTAINMENT_CONFIDENCE = 0.95
KEYWORD_CONFIDENCE = 0.85
WORD_PENALTY = 0.9  # a single transcript word matching a full name is weaker evidence
MIN_KEYWORD_LENGTH = 4  # shorter name words ("the", "of", "mr") are too ambiguous to accept alone


def normalize(text: str) -> str:
	"""
	Lowercase, drop punctuation/symbols and trim.
	Internal whitespace runs are kept as-is. Trimming last keeps the result idempotent.
	"""
	if not text:
		return ''
	return _NON_ALNUM.sub('', text.lower()).strip()


def similarity(a: str, b: str) -> float:
	"""1 - levenshtein(a, b) / max(len(a), len(b)); 1.0 for two empty strings."""
	longest = max(len(a), len(b))
	if longest == 0:
		return 1.0
	return 1.0 - Levenshtein.distance(a, b) / longest


class _Candidate:
	"""Normalized transcript/target pair shared by every matcher of one verification."""

	def __init__(self, transcript: str, target: str, threshold: float):
		self.transcript = transcript
		self.target = target
		self.threshold = threshold
		self.transcript_words: List[str] = transcript.split()
		self.target_words: List[str] = target.split()

	@cached_property
	def whole_similarity(self) -> float:
		return similarity(self.transcript, self.target)


def _exact(c: _Candidate) -> Optional[MatchVerdict]:
	if c.transcript == c.target:
		return MatchVerdict(True, EXACT_CONFIDENCE, "exact")
	return None


def _containment(c: _Candidate) -> Optional[MatchVerdict]:
	# Directional: transcripts carry extra words ("i think it is elsa"), names do not
	if c.target in c.transcript:
		return MatchVerdict(True, CONTAINMENT_CONFIDENCE, "containment")
	return None


def _keyword(c: _Candidate) -> Optional[MatchVerdict]:
	if len(c.target_words) <= 1:
		return None
	for word in c.target_words:  # target order decides which word wins
		if len(word) >= MIN_KEYWORD_LENGTH and word in c.transcript_words:
			return MatchVerdict(True, KEYWORD_CONFIDENCE, "keyword")
	return None


def _whole_distance(c: _Candidate) -> Optional[MatchVerdict]:
	if c.whole_similarity >= c.threshold:
		return MatchVerdict(True, c.whole_similarity, "whole_distance")
	return None


def _word_distance(c: _Candidate) -> Optional[MatchVerdict]:
	for word in c.transcript_words:
		word_similarity = similarity(word, c.target)
		if word_similarity >= c.threshold:
			return MatchVerdict(True, word_similarity * WORD_PENALTY, "word_distance")
	return None


MATCHERS: Tuple[Tuple[str, Callable[[_Candidate], Optional[MatchVerdict]]], ...] = (
	("exact", _exact),
	("containment", _containment),
	("keyword", _keyword),
	("whole_distance", _whole_distance),
	("word_distance", _word_distance),
)


def verify(transcript: str, target_name: str, threshold: Optional[float] = None) -> MatchVerdict:
	"""
	Check whether `transcript` names `target_name`.
	Never raises: empty inputs (after normalization) give a no-match with confidence 0.
	On a no-match the confidence is the whole-string similarity, not the best word similarity.
	"""
	if threshold is None:
		threshold = config.MATCH_THRESHOLD

	normalized_transcript = normalize(transcript)
	normalized_target = normalize(target_name)
	if not normalized_transcript or not normalized_target:  # nothing to compare
		return MatchVerdict(False, 0.0)

	candidate = _Candidate(normalized_transcript, normalized_target, threshold)
	for name, matcher in MATCHERS:
		verdict = matcher(candidate)
		if verdict is not None:
			logger.debug(f"[Matcher] '{normalized_transcript}' vs '{normalized_target}' -> {name} ({verdict.confidence:.3f})")
			return verdict

	logger.debug(f"[Matcher] '{normalized_transcript}' vs '{normalized_target}' -> no match ({candidate.whole_similarity:.3f})")
	return MatchVerdict(False, candidate.whole_similarity)
