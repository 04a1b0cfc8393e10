"""Command-line front end for the story toolkit."""
