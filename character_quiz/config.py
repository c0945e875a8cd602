"""
Configuration for the Character Quiz.
Defaults live here; a few values can be overridden through environment variables.
"""

import os  # environment-based overrides
from pathlib import Path  # locate bundled data next to the package

# Remote collection endpoint (read-only, paginated)
COLLECTION_API_URL = os.getenv("QUIZ_API_URL", "https://api.disneyapi.dev/character")

# Page sizes: small pages when browsing everything, large ones when building a category pool
PAGE_SIZE = 50
FILTERED_PAGE_SIZE = 200

# Seconds before the transport gives up on a single page request
REQUEST_TIMEOUT = float(os.getenv("QUIZ_REQUEST_TIMEOUT", "10"))

# Quality gate: sum of all membership list sizes a character needs to be quizzed on
MIN_POPULARITY_SCORE = 10

# Random pages tried in unfiltered mode before giving up
MAX_PAGE_ATTEMPTS = 5

# Minimum edit-distance similarity accepted as a correct answer
MATCH_THRESHOLD = float(os.getenv("QUIZ_MATCH_THRESHOLD", "0.7"))

# Categories served from bundled data instead of the remote source (sparse or unreliable remotely)
DATA_DIR = Path(__file__).resolve().parent / "data"
BUNDLED_CATEGORIES = {
	"Cars": DATA_DIR / "cars.jsonl",
}

# Categories offered to players in the film picker
POPULAR_FILMS = [
	"Frozen",
	"Moana",
	"The Lion King",
	"Aladdin",
	"The Little Mermaid",
	"Tangled",
	"Toy Story",
	"Mulan",
	"Beauty and the Beast",
	"The Jungle Book",
	"Cinderella",
	"Sleeping Beauty",
	"Wreck-It Ralph",
	"Big Hero 6",
	"Zootopia",
	"Encanto",
	"Cars",
]
