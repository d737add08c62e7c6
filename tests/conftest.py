"""Shared test setup.

Runs before any application module is imported. The hand-off service is
pointed at a closed local port so sale notifications and trade offers fail
fast and are logged, the documented behaviour when the provider is down.
"""

import os

os.environ.setdefault("HANDOFF_BASE_URL", "http://127.0.0.1:9")
os.environ.setdefault("HANDOFF_TIMEOUT_SECONDS", "1")
