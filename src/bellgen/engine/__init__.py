"""Synthesis engine: expectation schedule, row pipeline and table assembly."""
