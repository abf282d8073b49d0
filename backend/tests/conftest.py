"""Root conftest — shared test configuration."""

import os

# Tests never talk to a real database unless a fixture wires one in
os.environ.setdefault("DATABASE_URL", "")
os.environ.setdefault("LOG_FORMAT", "text")
