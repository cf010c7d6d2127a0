"""Shared test setup: in-memory storage and small fakes for the sync hub."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before fleetsync.config is imported anywhere
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("SEED_DEFAULT_FLEET", "true")
os.environ.setdefault("REQUIRE_JOIN_FOR_EDITS", "true")
