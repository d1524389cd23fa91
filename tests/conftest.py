"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
application at an in-memory database before any application module is imported.
"""

import os
import sys
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DB_INIT_ATTEMPTS", "1")

# Add project root and tests dir to sys.path so we can import domain, services, test_fixtures
project_root = Path(__file__).parent.parent
for path in (project_root, Path(__file__).parent):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
