"""pinme command-line interface."""
