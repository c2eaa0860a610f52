"""Integration tests for the lexical search service."""

import json

import pytest

from lexical_search import create_index, search
from lexical_search.api.service import LexicalSearchService
from lexical_search.core.exceptions import LexicalSearchError, ValidationError
from lexical_search.models.options import SearchOptions


class TestLexicalSearchServiceIntegration:
    """Integration tests for the complete service."""

    async def test_full_workflow(self, search_service, contacts):
        """Test building an index once and querying it several times."""
        index = await search_service.create_index(
            contacts,
            {"fields": ["name", "phone_number", "notes"], "threshold": 0.1, "maxResults": 5}
        )

        alice = await search_service.search(index, "alic")
        assert [r.item["id"] for r in alice] == ["chat_001", "chat_003"]

        phone = await search_service.search(index, "900456")
        assert [r.item["id"] for r in phone] == ["chat_002"]

        notes = await search_service.search(index, "billing")
        assert [r.item["id"] for r in notes] == ["chat_002"]

        stats = search_service.get_stats()
        assert stats['total_indexes'] == 1
        assert stats['total_documents'] == 3
        assert stats['total_searches'] == 3
        assert stats['avg_search_time'] >= 0

    async def test_default_options(self, contacts):
        """Test service defaults apply under per-call options."""
        async with LexicalSearchService.create(
            default_options={"fields": ["name"], "maxResults": 1},
            log_level="WARNING"
        ) as service:
            index = await service.create_index(contacts, {"threshold": 0.1})

            assert index.options == SearchOptions(fields=["name"], max_results=1, threshold=0.1)
            assert len(await service.search(index, "alice")) == 1

    async def test_search_items(self, search_service, people):
        """Test one-shot searching."""
        results = await search_service.search_items(people, "John")

        assert [r.item["id"] for r in results] == [1, 3]

    async def test_simple_search(self, search_service, people):
        """Test item-only results."""
        items = await search_service.simple_search(people, "smith")

        assert items == [people[1]]

    async def test_search_with_threshold(self, search_service, people):
        """Test min_score overrides any threshold in options."""
        assert await search_service.search_with_threshold(people, "John", 100.0) == []

        results = await search_service.search_with_threshold(people, "John", 0.1, {"threshold": 100.0})
        assert len(results) == 2
        assert all(r.score >= 0.1 for r in results)

    async def test_best_match(self, search_service):
        """Test best match selection for contact lookups."""
        chats = [
            {"id": "c1", "name": "Sam Carter"},
            {"id": "c2", "name": "Samantha Carter"},
            {"id": "c3", "name": "Sam"},
        ]
        results = await search_service.search_items(chats, "sam carter", {"fields": ["name"]})

        best = LexicalSearchService.best_match(results)
        assert best is not None
        assert best.item["id"] == "c1"
        assert LexicalSearchService.best_match([]) is None

    async def test_results_to_json(self, search_service, people):
        """Test JSON serialization for the connector boundary."""
        results = await search_service.search_items(people, "jane")

        payload = json.loads(LexicalSearchService.results_to_json(
            results,
            query="jane",
            extra={"source": "stored_contacts"}
        ))

        assert payload["query"] == "jane"
        assert payload["total_matches"] == 1
        assert payload["source"] == "stored_contacts"
        assert payload["results"][0]["item"] == {"name": "Jane Smith", "id": 2}
        assert payload["results"][0]["score"] > 0
        assert payload["results"][0]["matches"] == ["jane"]

    async def test_results_to_json_circular_item(self, search_service):
        """Test unserializable items surface as LexicalSearchError."""
        item = {"name": "loop"}
        item["self"] = item
        results = await search_service.search_items([item], "loop")

        with pytest.raises(LexicalSearchError):
            LexicalSearchService.results_to_json(results)

    async def test_validation_errors_pass_through(self, search_service):
        """Test caller type errors are not rewrapped."""
        with pytest.raises(ValidationError):
            await search_service.create_index([{"name": "ok"}, 5])

        index = await search_service.create_index([{"name": "ok"}])
        with pytest.raises(ValidationError):
            await search_service.search(index, "ok", {"boost": "name"})

    async def test_closed_service(self, people):
        """Test a closed service refuses work."""
        service = LexicalSearchService(log_level="WARNING")
        await service.close()

        with pytest.raises(LexicalSearchError, match="closed"):
            await service.create_index(people)

        assert service.get_stats()['closed'] is True

    async def test_service_index_works_with_core_search(self, search_service, people):
        """Test indexes built by the service are plain SearchIndex values."""
        index = await search_service.create_index(people)

        results = await search(index, "doe")

        assert [r.item["id"] for r in results] == [1]

    async def test_independent_indexes(self, people, documents):
        """Test several indexes coexist without shared statistics."""
        people_index = await create_index(people)
        documents_index = await create_index(documents)

        assert [r.item["id"] for r in await search(people_index, "john")] == [1, 3]
        assert [r.item["id"] for r in await search(documents_index, "regular")] == [1, 2]
