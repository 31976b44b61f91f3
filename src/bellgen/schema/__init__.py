"""Configuration schema: defaults, loading, validation and samples."""
