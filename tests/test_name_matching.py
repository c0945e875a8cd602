"""
Unit tests for answer verification: normalization, each cascade tier, and no-match confidence.
Run: pytest tests/test_name_matching.py
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from character_quiz.name_matching import normalize, similarity, verify


def assert_match(verdict, tier, confidence, msg):
	if not verdict.is_match or verdict.tier != tier or verdict.confidence != pytest.approx(confidence):
		raise AssertionError(f"{msg} | expected=({tier}, {confidence}), actual={verdict}")


def test_normalize_strips_punctuation_and_case():
	assert normalize("  Mr. Incredible!  ") == "mr incredible"
	assert normalize("Wreck-It Ralph") == "wreckit ralph"
	# internal whitespace runs are kept
	assert normalize("Lilo & Stitch") == "lilo  stitch"
	assert normalize("") == ""
	assert normalize(None) == ""


def test_trailing_punctuation_is_trimmed_before_comparing():
	# stripping happens before trimming, so a dangling "?" leaves no space behind
	assert_match(verify("simba ?", "Simba"), "exact", 1.0, "trim after strip")


def test_normalize_is_idempotent():
	samples = ["Simba", " !a ", "Héllo  World!!", "\tMr. Incredible\n", "&&&", "Big Hero 6", "é Elsa é"]
	for s in samples:
		once = normalize(s)
		assert normalize(once) == once, f"not idempotent for {s!r}"


def test_exact_match():
	assert_match(verify("simba", "Simba"), "exact", 1.0, "exact")
	assert_match(verify("Simba!", "simba"), "exact", 1.0, "exact ignores punctuation")


def test_containment_match():
	assert_match(verify("I think it is Elsa the snow queen", "Elsa"), "containment", 0.95, "containment")


def test_containment_is_directional():
	# transcript inside the target is not enough
	verdict = verify("ana", "Anastasia")
	assert not verdict.is_match


def test_keyword_match_for_multi_word_names():
	assert_match(verify("moana", "Moana Waialiki"), "keyword", 0.85, "first name")
	assert_match(verify("lightyear", "Buzz Lightyear"), "keyword", 0.85, "later word")


def test_keyword_requires_four_letters():
	verdict = verify("the", "The Beast")
	assert not verdict.is_match
	assert verdict.tier is None


def test_single_word_names_fall_through_to_edit_distance():
	verdict = verify("olafr", "Olafur")
	assert verdict.tier == "whole_distance"
	assert verdict.confidence == pytest.approx(1 - 1 / 6)


def test_whole_string_edit_distance():
	verdict = verify("symba", "Simba")
	assert_match(verdict, "whole_distance", 0.8, "one substitution over five letters")
	assert verdict.confidence >= 0.7


def test_edit_distance_can_outscore_keyword_confidence():
	# tiers are ordered by priority, not by the confidence they can report
	verdict = verify("frankenwenie", "Frankenweenie")
	assert verdict.tier == "whole_distance"
	assert verdict.confidence == pytest.approx(1 - 1 / 13)
	assert verdict.confidence > 0.85


def test_per_word_edit_distance_is_penalized():
	verdict = verify("maybe symba", "Simba")
	assert_match(verdict, "word_distance", 0.8 * 0.9, "single near-miss word")


def test_dissimilar_strings_do_not_match():
	verdict = verify("xyz123", "Cinderella")
	assert not verdict.is_match
	assert verdict.confidence < 0.7


def test_no_match_reports_whole_string_similarity():
	# the word "simbx" is 0.8 similar but under this threshold; it is not reported
	verdict = verify("hello simbx", "Simba", threshold=0.9)
	assert not verdict.is_match
	assert verdict.confidence == pytest.approx(similarity("hello simbx", "simba"))
	assert verdict.confidence < 0.8


def test_threshold_is_respected():
	assert verify("symba", "Simba", threshold=0.75).is_match
	verdict = verify("symba", "Simba", threshold=0.81)
	assert not verdict.is_match
	assert verdict.confidence == pytest.approx(0.8)


def test_empty_inputs_never_match():
	for transcript, name in [("", "Simba"), ("simba", ""), ("!!!", "Simba"), ("   ", "   ")]:
		verdict = verify(transcript, name)
		assert not verdict.is_match
		assert verdict.confidence == 0.0


def test_confidence_stays_in_unit_range():
	pairs = [("a", "Cinderella"), ("cinderella cinderella", "Cinderella"), ("zzzz", "z"), ("1 2 3", "Big Hero 6")]
	for transcript, name in pairs:
		verdict = verify(transcript, name)
		assert 0.0 <= verdict.confidence <= 1.0
