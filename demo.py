#!/usr/bin/env python
from app.config import get_settings
from app.seed import seed_via_client
from sdk.inventory import InventoryClient

def main():
    c = InventoryClient(base_url=get_settings().api_base_url)

    # -----------------------------
    # Seed sample data
    # -----------------------------
    print("Seeding categories and items...")
    ids = seed_via_client(c)
    mens, womens = ids["categories"]
    jacket = ids["items"][0]

    print("\nSummary:")
    print(c.summary())

    # -----------------------------
    # Listings
    # -----------------------------
    print("\nCategories:")
    print(c.list_categories())
    print("\nItems:")
    print(c.list_items())

    # -----------------------------
    # Validation failure
    # -----------------------------
    print("\nCreating an item with a bad price...")
    resp = c.create_item("Broken", "cheap", 1)
    print(resp["errors"])

    # -----------------------------
    # Update an item
    # -----------------------------
    print("\nMoving the jacket into both categories...")
    print(c.update_item(jacket, "Striped Jacket", 89, 5, category=[mens, womens], description="Now on sale"))
    print(c.get_item(jacket))

    # -----------------------------
    # Referential guard
    # -----------------------------
    print("\nTrying to delete a category that still has items...")
    resp = c.delete_category(mens)
    print([it["name"] for it in resp.get("category_items", [])])

    print("\nCreating and deleting an empty category...")
    empty = c.id_from_redirect(c.create_category("Accessories")["redirect"])
    print(c.delete_category(empty))

if __name__ == "__main__":
    main()
