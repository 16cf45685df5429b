"""Populate the inventory with a couple of sample categories and items.

Run against a live server with ``python -m app.seed --url http://127.0.0.1:8085``.
"""
import asyncio
from typing import Any, Dict, List

from rich import print

from .database import Store

CATEGORIES: List[Dict[str, Any]] = [
    {"name": "Men's Fashion", "description": "The most sustainable of men's fashion. stylish and modern"},
    {"name": "Women's Fashion", "description": "Where elegance meets sustainability is your priority"},
]

# "category" holds indexes into CATEGORIES
ITEMS: List[Dict[str, Any]] = [
    {"name": "Striped Jacket", "description": "Comfortable, modern jacket", "category": [0], "price": 99, "stock": 6},
    {"name": "Mermaid's scale dress", "description": "Modern, high-fashion dress", "category": [1], "price": 679, "stock": 3},
    {"name": "Pineapple dream t-shirt", "description": "Casual, fun t-shirt", "category": [0], "price": 29.99, "stock": 60},
]


async def seed_store(store: Store) -> Dict[str, List[str]]:
    categories = await asyncio.gather(*(store.categories.insert_one(c) for c in CATEGORIES))
    category_ids = [c["id"] for c in categories]
    items = await asyncio.gather(*(
        store.items.insert_one(dict(it, category=[category_ids[i] for i in it["category"]]))
        for it in ITEMS
    ))
    return {"categories": category_ids, "items": [it["id"] for it in items]}


def seed_via_client(client) -> Dict[str, List[str]]:
    category_ids = []
    for c in CATEGORIES:
        resp = client.create_category(c["name"], c["description"])
        category_ids.append(client.id_from_redirect(resp["redirect"]))
        print(f"[green]Added Category:[/green] {c['name']}")

    item_ids = []
    for it in ITEMS:
        resp = client.create_item(
            it["name"], it["price"], it["stock"],
            category=[category_ids[i] for i in it["category"]],
            description=it["description"],
        )
        item_ids.append(client.id_from_redirect(resp["redirect"]))
        print(f"[green]Added Item:[/green] {it['name']}")
    return {"categories": category_ids, "items": item_ids}


if __name__ == "__main__":
    import argparse
    from sdk.inventory import InventoryClient
    from .config import get_settings

    parser = argparse.ArgumentParser(description="Populate the inventory with sample data")
    parser.add_argument("--url", default=get_settings().api_base_url, help="Base url of the inventory server")
    args = parser.parse_args()

    seed_via_client(InventoryClient(base_url=args.url))
