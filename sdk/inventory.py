# sdk/inventory.py
import requests
import httpx
from typing import Optional, List, Dict, Any
from rich import print


class InventoryClient:
    def __init__(self, base_url: str = "http://localhost:8085", timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    @staticmethod
    def id_from_redirect(url: str) -> str:
        # entity urls look like /category/<id> or /item/<id>
        return url.rstrip("/").rsplit("/", 1)[-1]

    def _get(self, path: str):
        r = self.session.get(f"{self.base_url}{path}", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def _submit(self, path: str, data: Dict[str, Any]) -> Dict[str, Any]:
        # A successful submit answers with a redirect; a form with errors is
        # rendered again and returned as-is so callers can read "errors".
        r = self.session.post(f"{self.base_url}{path}", data=data, timeout=self.timeout, allow_redirects=False)
        if r.is_redirect:
            return {"redirect": r.headers["location"]}
        r.raise_for_status()
        return r.json()

    # Summary
    def summary(self):
        return self._get("/inventory/")

    # Categories
    def list_categories(self):
        return self._get("/inventory/categories")["category_list"]

    def get_category(self, category_id: str):
        return self._get(f"/inventory/category/{category_id}")

    def create_category(self, name: str, description: Optional[str] = None):
        data = {"name": name}
        if description:
            data["description"] = description
        return self._submit("/inventory/category/create", data)

    def delete_category(self, category_id: str):
        return self._submit(f"/inventory/category/{category_id}/delete", {"categoryid": category_id})

    # Items
    def list_items(self):
        return self._get("/inventory/items")["item_list"]

    def get_item(self, item_id: str):
        return self._get(f"/inventory/item/{item_id}")["item"]

    def _item_form(self, name: str, price: float, stock: int, category: Optional[List[str]], description: Optional[str]):
        data: Dict[str, Any] = {"name": name, "price": price, "stock": stock}
        if description:
            data["description"] = description
        if category:
            data["category"] = list(category)
        return data

    def create_item(self, name: str, price: float, stock: int, category: Optional[List[str]] = None, description: Optional[str] = None):
        return self._submit("/inventory/item/create", self._item_form(name, price, stock, category, description))

    def update_item(self, item_id: str, name: str, price: float, stock: int, category: Optional[List[str]] = None, description: Optional[str] = None):
        return self._submit(f"/inventory/item/{item_id}/update", self._item_form(name, price, stock, category, description))

    def delete_item(self, item_id: str):
        return self._submit(f"/inventory/item/{item_id}/delete", {"itemid": item_id})

    # Async create (example)
    async def create_item_async(self, name: str, price: float, stock: int, category: Optional[List[str]] = None, description: Optional[str] = None):
        data = self._item_form(name, price, stock, category, description)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(f"{self.base_url}/inventory/item/create", data=data)
            if r.is_redirect:
                return {"redirect": r.headers["location"]}
            r.raise_for_status()
            return r.json()


if __name__ == "__main__":
    import argparse
    from app.config import get_settings

    parser = argparse.ArgumentParser(description="Inventory CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("summary", help="Show item and category counts")

    # ---------------------------
    # Category commands
    # ---------------------------
    subparsers.add_parser("list-categories", help="List all categories")

    gc = subparsers.add_parser("get-category", help="Show a category and its items")
    gc.add_argument("--category-id", required=True)

    cc = subparsers.add_parser("create-category", help="Create a category")
    cc.add_argument("--name", required=True)
    cc.add_argument("--description")

    dc = subparsers.add_parser("delete-category", help="Delete a category with no items")
    dc.add_argument("--category-id", required=True)

    # ---------------------------
    # Item commands
    # ---------------------------
    subparsers.add_parser("list-items", help="List all items")

    gi = subparsers.add_parser("get-item", help="Show an item")
    gi.add_argument("--item-id", required=True)

    for cmd in ("create-item", "update-item"):
        p = subparsers.add_parser(cmd, help=f"{cmd.split('-')[0].title()} an item")
        if cmd == "update-item":
            p.add_argument("--item-id", required=True)
        p.add_argument("--name", required=True)
        p.add_argument("--price", type=float, required=True)
        p.add_argument("--stock", type=int, required=True)
        p.add_argument("--category", action="append", help="Category id (repeatable)")
        p.add_argument("--description")

    di = subparsers.add_parser("delete-item", help="Delete an item")
    di.add_argument("--item-id", required=True)

    args = parser.parse_args()
    c = InventoryClient(base_url=get_settings().api_base_url)

    if args.command == "summary":
        print(c.summary())
    elif args.command == "list-categories":
        print(c.list_categories())
    elif args.command == "get-category":
        print(c.get_category(args.category_id))
    elif args.command == "create-category":
        print(c.create_category(args.name, args.description))
    elif args.command == "delete-category":
        print(c.delete_category(args.category_id))
    elif args.command == "list-items":
        print(c.list_items())
    elif args.command == "get-item":
        print(c.get_item(args.item_id))
    elif args.command == "create-item":
        print(c.create_item(args.name, args.price, args.stock, args.category, args.description))
    elif args.command == "update-item":
        print(c.update_item(args.item_id, args.name, args.price, args.stock, args.category, args.description))
    elif args.command == "delete-item":
        print(c.delete_item(args.item_id))
