"""Backend service for the mystery game."""
