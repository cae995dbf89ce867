"""Little Engine: an LLM-backed interrogation mystery game."""
