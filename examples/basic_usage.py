"""Basic usage example for lexical search."""

import asyncio
import json
from pathlib import Path

from lexical_search import LexicalSearchService


def load_sample_contacts(data_file: Path) -> list:
    """Load sample contacts from JSON file."""
    with open(data_file) as f:
        return json.load(f)


async def basic_search_demo():
    """Demonstrate basic search functionality."""
    print("🔍 Lexical Search - Basic Usage Demo")
    print("=" * 50)

    # Initialize the search service
    print("\n1. Initializing search service...")
    async with LexicalSearchService.create(log_level="INFO") as service:

        # Load sample contacts
        print("\n2. Loading sample contacts...")
        sample_data_file = Path(__file__).parent / "sample_data" / "contacts.json"

        if not sample_data_file.exists():
            print("   Generating sample data...")
            from sample_data.generate_sample_data import save_sample_data
            save_sample_data(sample_data_file.parent)

        contacts = load_sample_contacts(sample_data_file)
        print(f"   Loaded {len(contacts)} contacts")

        # Build the index the way a contact lookup tool does
        print("\n3. Building search index...")
        index = await service.create_index(contacts, {
            "fields": ["name", "phone_number", "notes"],
            "threshold": 0.1,
            "maxResults": 5
        })

        stats = index.get_stats()
        print(f"   Index contains {stats['total_documents']} contacts")
        print(f"   Vocabulary size: {stats['vocabulary_size']} terms")

        # Perform basic searches
        print("\n4. Performing searches...")

        search_examples = [
            ("Alice", "Find contacts by first name"),
            ("Samantha Carter", "Full name lookup"),
            ("Patle", "Surname with a typo"),
            ("billing", "Match on notes"),
            ("7700 900", "Partial phone number")
        ]

        for query_text, description in search_examples:
            print(f"\n   Query: '{query_text}' ({description})")

            results = await service.search(index, query_text)

            if results:
                print(f"   Found {len(results)} results:")
                for i, result in enumerate(results, 1):
                    print(f"     {i}. {result.item['name']} ({result.item['id']}) - Score: {result.score:.3f}")
                    print(f"        Matched terms: {', '.join(result.matches)}")
            else:
                print("   No results found")

        # Contact tools only act on a confident best match
        print("\n5. Best match lookup...")
        results = await service.search(index, "alice johnson")
        best = service.best_match(results)

        if best is not None and best.score > 0.5:
            print(f"   Sending to {best.item['name']} ({best.item['phone_number']})")
        else:
            print("   No confident match; ask the user to pick a contact")

        print("\n6. JSON payload for the tool response...")
        print(service.results_to_json(results[:2], query="alice johnson")[:200] + "...")

        # Final statistics
        final_stats = service.get_stats()
        print(f"\n   Total searches performed: {final_stats['total_searches']}")
        print(f"   Average search time: {final_stats['avg_search_time']:.3f}s")

    print("\n✅ Demo completed successfully!")
    print("\nNext steps:")
    print("- Check out advanced_usage.py for boosts, sorting and field selection")
    print("- Explore the test suite to understand all features")


if __name__ == "__main__":
    asyncio.run(basic_search_demo())
