"""Generate realistic connector record samples."""

import json
import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List


def generate_contacts(count: int = 40) -> List[Dict[str, Any]]:
    """Generate stored messaging contacts."""
    first_names = [
        "Alice", "Alicia", "Bob", "Carol", "David", "Erin", "Frank",
        "Grace", "Heidi", "Ivan", "Judy", "Mallory", "Sam", "Samantha"
    ]
    last_names = [
        "Johnson", "Martin", "Nguyen", "Okafor", "Patel", "Rossi",
        "Schmidt", "Carter", "Keys", "Moreau"
    ]
    companies = ["Acme Corp", "Globex", "Initech", "Umbrella", "Hooli", "Vandelay Industries"]
    notes = [
        "Project lead for the {company} migration",
        "Invoices and billing questions",
        "Met at the London meetup, interested in pricing",
        "Prefers WhatsApp over email",
        "Escalation contact for support tickets",
        None,
    ]
    networks = ["WHATSAPP", "LINKEDIN", "TELEGRAM", "INSTAGRAM"]

    contacts = []
    base_date = datetime.now() - timedelta(days=90)

    for i in range(count):
        company = random.choice(companies)
        note = random.choice(notes)
        last_seen = base_date + timedelta(hours=random.randint(0, 90 * 24))

        contacts.append({
            "id": f"chat_{i + 1:03d}",
            "name": f"{random.choice(first_names)} {random.choice(last_names)}",
            "phone_number": f"+44 7700 {random.randint(900000, 900999)}",
            "notes": note.format(company=company) if note else None,
            "network": random.choice(networks),
            "profile": {
                "company": company,
                "tags": random.sample(["customer", "vendor", "partner", "lead", "vip"], k=2)
            },
            "unread_count": random.randint(0, 12),
            "timestamp": last_seen.isoformat()
        })

    return contacts


def generate_vault_items(count: int = 25) -> List[Dict[str, Any]]:
    """Generate password vault item summaries."""
    services = [
        ("GitHub", "github.com"), ("AWS Console", "aws.amazon.com"),
        ("Stripe Dashboard", "dashboard.stripe.com"), ("Gmail", "mail.google.com"),
        ("Slack", "slack.com"), ("Jira", "atlassian.net"), ("Figma", "figma.com")
    ]
    categories = ["LOGIN", "PASSWORD", "API_CREDENTIAL", "SECURE_NOTE"]
    vaults = ["Personal", "Engineering", "Finance"]

    items = []
    base_date = datetime.now() - timedelta(days=365)

    for i in range(count):
        title, domain = random.choice(services)
        updated = base_date + timedelta(days=random.randint(0, 365))

        items.append({
            "id": f"item_{i + 1:03d}",
            "title": f"{title} {random.choice(['admin', 'personal', 'team', 'billing'])}",
            "category": random.choice(categories),
            "vault": {"name": random.choice(vaults)},
            "urls": [{"href": f"https://{domain}", "primary": True}],
            "tags": random.sample(["work", "shared", "2fa", "legacy"], k=random.randint(0, 2)),
            "updated_at": updated.isoformat()
        })

    return items


def save_sample_data(output_dir: Path) -> Dict[str, List[Dict[str, Any]]]:
    """Generate and save all sample records."""
    output_dir.mkdir(parents=True, exist_ok=True)

    datasets = {
        "contacts": generate_contacts(),
        "vault_items": generate_vault_items()
    }

    for name, records in datasets.items():
        with open(output_dir / f"{name}.json", "w") as f:
            json.dump(records, f, indent=2)

    print("Generated sample records:")
    for name, records in datasets.items():
        print(f"  - {len(records)} {name.replace('_', ' ')}")
    print(f"Saved to: {output_dir}")

    return datasets


if __name__ == "__main__":
    output_dir = Path(__file__).parent
    save_sample_data(output_dir)
