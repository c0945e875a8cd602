"""Character Quiz: answer verification and character sampling for a portrait guessing game."""
