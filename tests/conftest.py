import sys
import os
from datetime import datetime, timezone

import pytest

# Add project root to sys.path so tests can import top-level modules like 'advice', 'scoring', 'normalize', etc.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from normalize.models import RepositoryFact  # noqa: E402

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)
RECENT = '2025-05-01T12:00:00Z'
STALE = '2023-01-01T12:00:00Z'


def make_fact(name, stars=0, updated_at=RECENT, language='Python', description=None, fork=False, archived=False, size=100):
    return RepositoryFact(name=name, description=description, language=language, stars=stars, updated_at=updated_at, fork=fork, archived=archived, size=size)


@pytest.fixture
def now():
    return NOW
