"""
Pytest Configuration and Fixtures

This module provides:
- Project root on sys.path (src/, web/ and tests/ import as packages)
- Shared pod fixtures in the pod server's wire format
- Mock collaborators
- Test category markers

Sample records live in tests/sample_data.py.
"""

import json
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.models.candidate import Candidate
from tests.sample_data import POD_RECORDS, USER_ORIGIN


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def pod_records():
    """Raw pod dicts as the pod server stores them."""
    return [dict(record) for record in POD_RECORDS]


@pytest.fixture
def pods_payload(pod_records):
    """The getPods response body: a list of JSON-encoded pods."""
    return [json.dumps(record) for record in pod_records]


@pytest.fixture
def candidates(pod_records):
    """Parsed Candidates for the sample pods, in server order."""
    return [Candidate.from_dict(record) for record in pod_records]


@pytest.fixture
def user_origin():
    return USER_ORIGIN


@pytest.fixture
def mock_pod_client(candidates):
    """A pod client double serving the sample pods and accepting every decision."""
    from src.clients.pod_client import PodClient

    client = Mock(spec=PodClient)
    client.get_user_interests.return_value = ["art", "sports"]
    client.get_pods.return_value = list(candidates)
    client.send_decision.return_value = True
    client.get_attenders.return_value = []
    return client


@pytest.fixture
def memory_store():
    """A connected in-memory quiz store."""
    from src.storage.mongo import MockQuizStore

    store = MockQuizStore()
    store.connect()
    yield store
    store.close()


# =============================================================================
# MARKERS FOR TEST CATEGORIES
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "swipe_queue: Queue and decision policy tests")
    config.addinivalue_line("markers", "filters: Tag and distance filter tests")
    config.addinivalue_line("markers", "storage: Persistence tests")
    config.addinivalue_line("markers", "web: HTTP service tests")
