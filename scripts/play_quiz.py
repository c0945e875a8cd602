"""
Play the character quiz in a terminal.

This script:
1) Opens a connection to the character collection
2) Shows a character (name hidden, portrait URL shown)
3) Reads a typed answer in place of a speech transcript
4) Judges it and keeps score until the rounds run out

Usage:
    python -m scripts.play_quiz --film "Frozen" --rounds 5

Type 'skip' to see another character, 'quit' to stop.
"""

import argparse  # command-line options
import asyncio  # the sampler is async
import sys  # exit codes

from loguru import logger  # console logging

from character_quiz.collection_client import CollectionClient  # HTTP transport
from character_quiz.errors import QuizError  # user-facing failures
from character_quiz.quiz import QuizGame  # round orchestration
from character_quiz.sampler import CharacterSampler  # character sampling
from character_quiz import config  # defaults and film list


def parse_args(argv=None):
	parser = argparse.ArgumentParser(description="Guess the character from its portrait.")
	parser.add_argument("--film", default="", help=f"Only show characters from this film (e.g. {', '.join(config.POPULAR_FILMS[:3])})")
	parser.add_argument("--rounds", type=int, default=5, help="Number of answered rounds to play")
	parser.add_argument("--threshold", type=float, default=config.MATCH_THRESHOLD, help="Minimum similarity for a near-miss to count")
	parser.add_argument("--verbose", action="store_true", help="Show debug logs")
	return parser.parse_args(argv)


async def play(film: str, rounds: int, threshold: float) -> int:
	async with CollectionClient() as client:
		game = QuizGame(CharacterSampler(client.fetch_page), threshold=threshold)
		game.category = film

		while game.board.total_attempts < rounds:
			try:
				character = await game.next_character()
			except QuizError as e:
				print(f"\n{e}")
				if input("Try again? [y/N] ").strip().lower() != "y":
					break
				continue
			if character is None:
				continue

			print(f"\nWho is this? {character.image_url}")
			answer = input("> ").strip()
			if answer.lower() == "quit":
				break
			if answer.lower() == "skip" or not answer:
				print(f"It was {character.name}.")
				continue

			result = game.submit_answer(answer)
			if result.verdict.is_match:
				print(f"Correct! It's {character.name}.")
			else:
				print(f"Not quite, it was {character.name}.")

		print(f"\nFinal score: {game.board.score}/{game.board.total_attempts}")
	return 0


def main(argv=None):
	args = parse_args(argv)
	logger.remove()  # replace the default handler to control verbosity
	logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")
	return asyncio.run(play(args.film.strip(), args.rounds, args.threshold))


if __name__ == '__main__':
	sys.exit(main())
