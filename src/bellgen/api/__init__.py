"""Import-first API: models, synthesizer facade, export and CLI."""
