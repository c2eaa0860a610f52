"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any, Dict, List

from lexical_search.api.service import LexicalSearchService


@pytest.fixture
def people() -> List[Dict[str, Any]]:
    """Create simple named records."""
    return [
        {"name": "John Doe", "id": 1},
        {"name": "Jane Smith", "id": 2},
        {"name": "Johnny Cash", "id": 3},
    ]


@pytest.fixture
def documents() -> List[Dict[str, Any]]:
    """Create title/content records for field and boost tests."""
    return [
        {"title": "Important Document", "content": "Regular content", "id": 1},
        {"title": "Regular Document", "content": "Important content", "id": 2},
    ]


@pytest.fixture
def contacts() -> List[Dict[str, Any]]:
    """Create nested contact records like those stored by messaging connectors."""
    return [
        {
            "id": "chat_001",
            "name": "Alice Johnson",
            "phone_number": "+44 7700 900123",
            "notes": "Project lead for the Atlas migration",
            "profile": {"company": "Acme Corp", "tags": ["engineering", "atlas"]},
            "unread_count": 2,
            "timestamp": "2024-03-01T10:00:00Z",
        },
        {
            "id": "chat_002",
            "name": "Bob Martin",
            "phone_number": "+44 7700 900456",
            "notes": "Invoices and billing questions",
            "profile": {"company": "Globex", "tags": ["finance"]},
            "unread_count": 0,
            "timestamp": "2024-02-14T08:30:00Z",
        },
        {
            "id": "chat_003",
            "name": "Alicia Keys",
            "phone_number": "+1 555 0100",
            "notes": None,
            "profile": {"company": "Initech", "tags": []},
            "unread_count": 5,
            "timestamp": "2024-03-05T19:45:00Z",
        },
    ]


@pytest.fixture
async def search_service():
    """Create a search service for testing."""
    async with LexicalSearchService.create(
        max_workers=2,
        log_level="WARNING"
    ) as service:
        yield service
