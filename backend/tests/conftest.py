"""Root conftest — shared test configuration."""

import os

# Tests never touch real backends, secrets or the scheduler
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SWEEP_ENABLED", "false")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("CHALLENGE_SECRET", "test-challenge-secret")
os.environ.setdefault("LOG_FORMAT", "text")
