"""Test core query engine functionality."""

import asyncio

import pytest

from lexical_search.core.engine import search, search_sync
from lexical_search.core.exceptions import ValidationError
from lexical_search.core.index import create_index, create_index_sync
from lexical_search.models.options import SearchOptions, SortBy, SortOrder
from lexical_search.models.result import SearchResult


class TestEmptyQuery:
    """Test the empty-query listing rule."""

    async def test_empty_string_returns_all_items(self):
        """Test '' lists every item with score 0 in order."""
        items = [{"name": "John Doe", "id": 1}, {"name": "Jane Smith", "id": 2}]
        index = await create_index(items)

        actual = await search(index, "")

        assert actual == [
            SearchResult(item={"name": "John Doe", "id": 1}, score=0),
            SearchResult(item={"name": "Jane Smith", "id": 2}, score=0),
        ]

    async def test_whitespace_returns_all_items(self):
        """Test whitespace-only queries behave like empty ones."""
        items = [{"name": "John Doe", "id": 1}, {"name": "Jane Smith", "id": 2}]
        index = await create_index(items)

        actual = await search(index, "   ")

        assert [r.item for r in actual] == items
        assert all(r.score == 0 for r in actual)

    async def test_empty_query_ignores_limits(self):
        """Test the listing is not thresholded or truncated."""
        items = [{"name": f"Item {i}"} for i in range(5)]
        index = await create_index(items, {"maxResults": 2, "threshold": 1.0})

        actual = await search(index, "")

        assert len(actual) == 5

    async def test_punctuation_only_query_lists_all(self):
        """Test a query without any terms lists every item."""
        items = [{"name": "John"}, {"name": "Jane"}]
        index = await create_index(items)

        actual = await search(index, "?!")

        assert [r.item for r in actual] == items
        assert all(r.score == 0 for r in actual)

    async def test_empty_index(self):
        """Test an empty index returns nothing for any query."""
        index = await create_index([])

        assert await search(index, "anything") == []
        assert await search(index, "") == []


class TestMatching:
    """Test matching and scoring."""

    async def test_matching_content(self, people):
        """Test 'John' finds John Doe and Johnny Cash only."""
        index = await create_index(people)

        actual = await search(index, "John")

        assert [r.item["id"] for r in actual] == [1, 3]
        assert all(r.score > 0 for r in actual)
        assert all(r.matches == ["john"] for r in actual)

    async def test_results_reference_original_items(self, people):
        """Test results carry the caller's objects."""
        index = await create_index(people)

        actual = await search(index, "Jane")

        assert len(actual) == 1
        assert actual[0].item is people[1]

    async def test_no_matches(self, people):
        """Test unmatched queries give an empty list."""
        index = await create_index(people)

        assert await search(index, "xyz123nonexistent") == []

    async def test_case_insensitive_by_default(self, people):
        """Test query case does not matter."""
        index = await create_index(people)

        upper = await search(index, "SMITH")
        lower = await search(index, "smith")

        assert upper == lower
        assert [r.item["id"] for r in upper] == [2]

    async def test_case_sensitive_index(self):
        """Test case sensitive indexes distinguish case."""
        items = [{"code": "ABC"}, {"code": "abc"}]
        index = await create_index(items, {"caseSensitive": True})

        actual = await search(index, "ABC")

        assert [r.item for r in actual] == [{"code": "ABC"}]

    async def test_array_membership(self):
        """Test array elements participate in scoring."""
        items = [{"tags": ["javascript", "typescript"]}, {"tags": ["python"]}]
        index = await create_index(items)

        actual = await search(index, "typescript")

        assert [r.item for r in actual] == [items[0]]

    async def test_multiple_terms_rank_higher(self):
        """Test items matching more query terms score higher."""
        items = [
            {"name": "Alice Johnson"},
            {"name": "Alice Cooper"},
            {"name": "Bob Johnson"},
        ]
        index = await create_index(items)

        actual = await search(index, "alice johnson")

        assert actual[0].item == {"name": "Alice Johnson"}
        assert actual[0].matches == ["alice", "johnson"]
        assert len(actual) == 3

    async def test_nested_field_search(self, contacts):
        """Test nested auto-discovered fields are searched."""
        index = await create_index(contacts)

        actual = await search(index, "Globex")

        assert [r.item["id"] for r in actual] == ["chat_002"]


class TestFuzzy:
    """Test fuzzy tolerance."""

    async def test_one_edit_matches_two_edits_do_not(self):
        """Test 'helo' finds 'hello world' while 'hezxo' does not."""
        index = await create_index([{"text": "hello world", "id": 1}], {"fields": ["text"]})

        one_off = await search(index, "helo", {})
        assert len(one_off) > 0

        two_off = await search(index, "hezxo", {})
        assert len(two_off) == 0

    async def test_typo_in_name(self, contacts):
        """Test a misspelt contact name still finds the contact."""
        index = await create_index(contacts, {"fields": ["name"]})

        actual = await search(index, "Bobb")

        assert [r.item["id"] for r in actual] == ["chat_002"]

    async def test_exact_match_not_outranked_by_prefix(self):
        """Test the exact item is first when prefix matches tie on score."""
        items = [{"name": "John"}, {"name": "Johnny"}]
        index = await create_index(items)

        actual = await search(index, "john")

        assert actual[0].item == {"name": "John"}


class TestOptions:
    """Test threshold, limits, fields, boosts and sorting."""

    async def test_threshold(self, people):
        """Test every result meets the threshold."""
        index = await create_index(people)

        actual = await search(index, "John", {"threshold": 0.1})

        assert len(actual) > 0
        assert all(r.score >= 0.1 for r in actual)

    async def test_score_equal_to_threshold_is_kept(self, people):
        """Test the threshold is inclusive."""
        index = await create_index(people)
        doe, cash = await search(index, "John")
        assert doe.score > cash.score

        at_lower = await search(index, "John", {"threshold": cash.score})
        assert [r.item["id"] for r in at_lower] == [1, 3]

        at_upper = await search(index, "John", {"threshold": doe.score})
        assert [r.item["id"] for r in at_upper] == [1]
        assert at_upper[0].score == doe.score

    async def test_high_threshold_filters_everything(self, people):
        """Test a threshold above every score gives no results."""
        index = await create_index(people)

        assert await search(index, "John", {"threshold": 100}) == []

    async def test_max_results(self):
        """Test results are truncated after ordering."""
        items = [{"name": "Test One", "id": 1}, {"name": "Test Two", "id": 2}, {"name": "Test Three", "id": 3}]
        index = await create_index(items)

        actual = await search(index, "Test", {"maxResults": 2})

        assert len(actual) <= 2

    async def test_negative_max_results_means_no_limit(self):
        """Test negative limits are treated as no limit."""
        items = [{"name": f"Test {i}"} for i in range(60)]
        index = await create_index(items)

        actual = await search(index, "Test", SearchOptions(max_results=-1))

        assert len(actual) == 60

    async def test_default_limit(self):
        """Test the default limit of 50."""
        items = [{"name": f"Test {i}"} for i in range(60)]
        index = await create_index(items)

        assert len(await search(index, "Test")) == 50

    async def test_index_options_are_query_defaults(self, people):
        """Test options stored at build time apply to searches."""
        index = await create_index(people, SearchOptions(max_results=1))

        assert len(await search(index, "John")) == 1
        assert len(await search(index, "John", {"maxResults": 5})) == 2

    async def test_custom_fields(self):
        """Test only indexed fields are searched."""
        index = await create_index(
            [{"title": "Test Title", "content": "Different content", "id": 1}],
            {"fields": ["title"]}
        )

        actual = await search(index, "Test")
        assert len(actual) > 0
        assert actual[0].item["title"] == "Test Title"

        assert await search(index, "Different") == []

    async def test_query_time_field_restriction(self, documents):
        """Test a fields override narrows scoring."""
        index = await create_index(documents)

        actual = await search(index, "Important", {"fields": ["content"]})

        assert [r.item["id"] for r in actual] == [2]

    async def test_boost_raises_boosted_field(self, documents):
        """Test boosting title ranks the title match first and raises its score."""
        index = await create_index(documents)

        plain = await search(index, "Important")
        boosted = await search(index, "Important", {"boost": {"title": 2.0}})

        plain_scores = {r.item["id"]: r.score for r in plain}
        boosted_scores = {r.item["id"]: r.score for r in boosted}

        assert all(r.score > 0 for r in boosted)
        assert boosted[0].item["id"] == 1
        assert boosted_scores[1] > plain_scores[1]
        assert boosted_scores[2] == pytest.approx(plain_scores[2])

    async def test_sort_by_property(self):
        """Test sorting by an item property in both directions."""
        items = [
            {"title": "Same Text", "createdAt": "100"},
            {"title": "Same Text", "createdAt": "300"},
            {"title": "Same Text", "createdAt": "200"},
        ]
        index = await create_index(items, {"fields": ["title", "createdAt"]})

        asc = await search(index, "Same", {"sortBy": {"property": "createdAt", "order": "ASC"}})
        assert [r.item["createdAt"] for r in asc] == ["100", "200", "300"]

        desc = await search(index, "Same", SearchOptions(sort_by=SortBy("createdAt", SortOrder.DESC)))
        assert [r.item["createdAt"] for r in desc] == ["300", "200", "100"]

    async def test_sort_defaults_to_ascending(self):
        """Test omitted order sorts ascending."""
        items = [{"name": "Alpha", "rank": 3}, {"name": "Alpha", "rank": 1}, {"name": "Alpha", "rank": 2}]
        index = await create_index(items)

        actual = await search(index, "alpha", {"sortBy": {"property": "rank"}})

        assert [r.item["rank"] for r in actual] == [1, 2, 3]

    async def test_sort_by_nested_property_with_missing_values(self):
        """Test missing sort values go last and ties keep insertion order."""
        items = [
            {"name": "Task", "stats": {"priority": 2}, "id": "a"},
            {"name": "Task", "id": "b"},
            {"name": "Task", "stats": {"priority": 1}, "id": "c"},
            {"name": "Task", "stats": {"priority": 2}, "id": "d"},
        ]
        index = await create_index(items, {"fields": ["name"]})

        asc = await search(index, "task", {"sortBy": {"property": "stats.priority"}})
        desc = await search(index, "task", {"sortBy": {"property": "stats.priority", "order": "DESC"}})

        assert [r.item["id"] for r in asc] == ["c", "a", "d", "b"]
        assert [r.item["id"] for r in desc] == ["a", "d", "c", "b"]

    async def test_unknown_sort_property_keeps_insertion_order(self, people):
        """Test sorting on a missing property is a stable no-op."""
        index = await create_index(people)

        actual = await search(index, "john", {"sortBy": {"property": "nope"}})

        assert [r.item["id"] for r in actual] == [1, 3]

    async def test_blank_sort_property_keeps_insertion_order(self, people):
        """Test an empty sort property is a no-op, not an error."""
        index = await create_index(people)

        actual = await search(index, "john", {"sortBy": {"property": ""}})

        assert [r.item["id"] for r in actual] == [1, 3]

    async def test_unknown_sort_order_sorts_ascending(self):
        """Test an unrecognised order falls back to ascending."""
        items = [{"name": "Alpha", "rank": 2}, {"name": "Alpha", "rank": 1}]
        index = await create_index(items)

        actual = await search(index, "alpha", {"sortBy": {"property": "rank", "order": "up"}})

        assert [r.item["rank"] for r in actual] == [1, 2]

    async def test_option_containers_are_not_shared(self, documents):
        """Test mutating a boost dict after the build leaves the index defaults alone."""
        boost = {"title": 2.0}
        index = await create_index(documents, SearchOptions(boost=boost))
        before = await search(index, "Important")

        boost["title"] = 10.0

        assert await search(index, "Important") == before

    async def test_sort_applies_before_truncation(self):
        """Test truncation keeps the first items of the sorted order."""
        items = [{"name": "Same", "n": n} for n in (5, 1, 4, 2, 3)]
        index = await create_index(items)

        actual = await search(index, "same", {"sortBy": {"property": "n"}, "maxResults": 2})

        assert [r.item["n"] for r in actual] == [1, 2]

    async def test_case_sensitive_override_is_ignored(self, people):
        """Test case sensitivity cannot change after the index is built."""
        index = await create_index(people)

        actual = await search(index, "JOHN", {"caseSensitive": True})

        assert [r.item["id"] for r in actual] == [1, 3]

    async def test_invalid_query_type(self, people):
        """Test non-string queries raise ValidationError."""
        index = await create_index(people)

        with pytest.raises(ValidationError):
            await search(index, 42)


class TestDeterminism:
    """Test results are reproducible."""

    async def test_repeated_searches_are_identical(self, contacts):
        """Test identical calls give identical scores and order."""
        index = await create_index(contacts)
        options = {"boost": {"name": 2.0}, "threshold": 0.0}

        first = await search(index, "alice atlas", options)
        second = await search(index, "alice atlas", options)

        assert first == second
        assert [r.score for r in first] == [r.score for r in second]

    async def test_concurrent_searches(self, contacts):
        """Test concurrent searches on one index agree."""
        index = await create_index(contacts)

        results = await asyncio.gather(*[search(index, "alice") for _ in range(10)])

        assert all(result == results[0] for result in results)

    def test_sync_and_async_agree(self, people):
        """Test the synchronous entry points match the coroutine ones."""
        index = create_index_sync(people)

        assert search_sync(index, "john") == asyncio.run(search(index, "john"))
