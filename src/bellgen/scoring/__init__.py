"""Scoring helpers for candidate rows and generated tables."""
