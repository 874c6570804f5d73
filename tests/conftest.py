import json
from dataclasses import replace
from pathlib import Path
from unittest.mock import Mock

import pytest

from linkhub.graphql import GRAPHQL_RETRY_POLICY

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture():
    """Loader for recorded API responses under tests/fixtures"""

    def load(name: str) -> dict:
        return json.loads((FIXTURES_DIR / name).read_text())

    return load


@pytest.fixture
def mock_logger():
    """Logger double recording retry decisions"""
    return Mock()


@pytest.fixture
def fast_graphql_policy():
    """GraphQL retry policy with the production count but no backoff"""
    return replace(GRAPHQL_RETRY_POLICY, wait=0.0, max_wait=0.0)
