"""Runtime helpers: randomness and logging."""
