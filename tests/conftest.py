"""
Pytest configuration and fixtures.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("DEBUG", "false")

from core.storage import RepositoryHandle  # noqa: E402
from core.storage.memory import MemoryTodoRepository  # noqa: E402


@pytest.fixture
def memory_repository():
    """A fresh, empty in-memory repository."""
    return MemoryTodoRepository()


@pytest.fixture
def handle(memory_repository):
    """Lock-guarded handle over the in-memory repository."""
    return RepositoryHandle(memory_repository)
