"""Core building blocks of the pinme client."""
