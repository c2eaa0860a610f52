"""Advanced usage examples for lexical search."""

import asyncio
import json
from pathlib import Path

from lexical_search import LexicalSearchService, SearchOptions, SortBy, SortOrder, create_index, search


def load_dataset(name: str) -> list:
    """Load a sample dataset, generating it on first use."""
    data_file = Path(__file__).parent / "sample_data" / f"{name}.json"
    if not data_file.exists():
        from sample_data.generate_sample_data import save_sample_data
        save_sample_data(data_file.parent)

    with open(data_file) as f:
        return json.load(f)


async def field_selection_demo():
    """Demonstrate auto-discovered versus explicit fields."""
    print("🔍 Field Selection Demo")
    print("=" * 40)

    items = load_dataset("vault_items")

    # Auto-discovery walks nested objects and arrays
    discovered = await create_index(items)
    print(f"Discovered fields: {', '.join(discovered.get_stats()['fields'])}")

    explicit = await create_index(items, SearchOptions(fields=["title", "vault.name", "urls.href"]))
    print(f"Explicit fields:   {', '.join(explicit.get_stats()['fields'])}")

    for query in ["github", "engineering", "stripe.com"]:
        results = await search(explicit, query, {"maxResults": 3})
        titles = [r.item["title"] for r in results]
        print(f"   '{query}': {titles}")

    # Narrow a query to a subset of the indexed fields
    vault_only = await search(explicit, "finance", {"fields": ["vault.name"]})
    print(f"   'finance' in vault names only: {len(vault_only)} results")


async def boost_demo():
    """Demonstrate per-field boosts."""
    print("\n🚀 Field Boost Demo")
    print("=" * 40)

    items = [
        {"title": "Billing runbook", "content": "How to rotate the Stripe key"},
        {"title": "Stripe key rotation", "content": "Steps for the billing team"},
    ]
    index = await create_index(items)

    for options in [None, {"boost": {"title": 2.0}}, {"boost": {"content": 2.0}}]:
        results = await search(index, "billing", options)
        ranking = ", ".join(f"{r.item['title']} ({r.score:.3f})" for r in results)
        print(f"   boost={options and options['boost']}: {ranking}")


async def sorting_demo():
    """Demonstrate sorting by item properties."""
    print("\n📅 Sorting Demo")
    print("=" * 40)

    contacts = load_dataset("contacts")
    index = await create_index(contacts, {"fields": ["name", "notes"], "maxResults": 5})

    by_score = await search(index, "billing")
    print(f"   By score: {[r.item['id'] for r in by_score]}")

    newest = await search(index, "billing", SearchOptions(sort_by=SortBy("timestamp", SortOrder.DESC)))
    print(f"   Newest first: {[r.item['timestamp'][:10] for r in newest]}")

    unread = await search(index, "billing", {"sortBy": {"property": "unread_count", "order": "DESC"}})
    print(f"   Most unread first: {[r.item['unread_count'] for r in unread]}")


async def tuning_demo():
    """Demonstrate thresholds and BM25 parameters."""
    print("\n🎯 Threshold and Tuning Demo")
    print("=" * 40)

    contacts = load_dataset("contacts")

    async with LexicalSearchService.create(
        default_options={"fields": ["name", "phone_number", "notes"]},
        log_level="WARNING"
    ) as service:
        for threshold in [0.0, 0.5, 1.0, 2.0]:
            results = await service.search_with_threshold(contacts, "sam carter", threshold)
            print(f"   threshold={threshold}: {len(results)} results")

        # b=0 turns off length normalization, k1=0 ignores repeated terms
        for k1, b in [(1.2, 0.75), (1.2, 0.0), (0.0, 0.75)]:
            results = await service.search_items(contacts, "alice johnson", {"k1": k1, "b": b, "maxResults": 3})
            print(f"   k1={k1}, b={b}: {[(r.item['name'], round(r.score, 3)) for r in results]}")

        items = await service.simple_search(contacts, "", {"maxResults": 3})
        print(f"   Empty query lists all {len(items)} contacts")


async def main():
    await field_selection_demo()
    await boost_demo()
    await sorting_demo()
    await tuning_demo()
    print("\n✅ Advanced demo completed!")


if __name__ == "__main__":
    asyncio.run(main())
