import asyncio
import logging
from typing import Optional, Dict, Any, List, Iterable, Tuple

from fastapi import HTTPException

from .core import (
    View, Redirect, CategoryIn, ItemIn,
    form_values, normalize_category, validate_form
)
from .database import Store, ASCENDING
from .models import (
    Category, CategoryChoice, Item, ItemSummary, ItemListing, ItemDetail
)

# Category and item workflows. Every function takes the store explicitly and
# returns a View to render or a Redirect to follow.

logger = logging.getLogger(__name__)

CATEGORY_LIST_URL = "/inventory/categories"
ITEM_LIST_URL = "/inventory/items"

BY_NAME = [("name", ASCENDING)]


# ---------------------------
# Shared lookups
# ---------------------------
async def _category_with_items(store: Store, category_id: str) -> Tuple[Optional[Category], List[ItemSummary]]:
    category, items = await asyncio.gather(
        store.categories.find_by_id(category_id),
        store.items.find({"category": category_id}, projection=["name", "description"]),
    )
    return (Category(**category) if category else None), [ItemSummary(**d) for d in items]

async def _populate(store: Store, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # replace category ids with Category records; dangling ids are dropped
    ids = list(dict.fromkeys(c for d in docs for c in d.get("category", [])))
    found = {c["id"]: Category(**c) for c in await store.categories.find_by_ids(ids)}
    for d in docs:
        d["category"] = [found[c] for c in d.get("category", []) if c in found]
    return docs

def _choices(docs: List[Dict[str, Any]], checked: Iterable[str]) -> List[CategoryChoice]:
    checked = set(checked)
    return [CategoryChoice(**d, checked=d["id"] in checked) for d in docs]


# ---------------------------
# Category workflow
# ---------------------------
async def category_list_logic(store: Store) -> View:
    docs = await store.categories.find(sort=BY_NAME)
    return View(template="category_list", context={
        "title": "Category List",
        "category_list": [Category(**d) for d in docs],
    })

async def category_detail_logic(store: Store, category_id: str) -> View:
    category, items = await _category_with_items(store, category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return View(template="category_detail", context={
        "title": "Category Detail",
        "category": category,
        "category_items": items,
    })

async def category_create_get_logic() -> View:
    return View(template="category_form", context={"title": "Create Category", "category": None, "errors": []})

async def category_create_post_logic(store: Store, data: Dict[str, Any]):
    form, errors = validate_form(CategoryIn, data)
    if errors:
        return View(template="category_form", context={
            "title": "Create Category",
            "category": form_values(data),
            "errors": errors,
        })

    doc = await store.categories.insert_one(form.model_dump())
    category = Category(**doc)
    logger.info("created category %s (%s)", category.id, category.name)
    return Redirect(url=category.url)

async def category_delete_get_logic(store: Store, category_id: str):
    category, items = await _category_with_items(store, category_id)
    if category is None:
        return Redirect(url=CATEGORY_LIST_URL)
    return View(template="category_delete", context={
        "title": "Delete Category",
        "category": category,
        "category_items": items,
    })

async def category_delete_post_logic(store: Store, category_id: str):
    category, items = await _category_with_items(store, category_id)
    if items:
        # still referenced: show the confirmation page again instead of deleting
        logger.info("not deleting category %s: %d item(s) reference it", category_id, len(items))
        return View(template="category_delete", context={
            "title": "Delete Category",
            "category": category,
            "category_items": items,
        })

    await store.categories.find_by_id_and_delete(category_id)
    logger.info("deleted category %s", category_id)
    return Redirect(url=CATEGORY_LIST_URL)

async def category_update_get_logic(category_id: str) -> str:
    return "NOT IMPLEMENTED: Category update GET"

async def category_update_post_logic(category_id: str) -> str:
    return "NOT IMPLEMENTED: Category update POST"


# ---------------------------
# Item workflow
# ---------------------------
async def index_logic(store: Store) -> View:
    num_items, num_categories = await asyncio.gather(
        store.items.count_documents(),
        store.categories.count_documents(),
    )
    return View(template="index", context={
        "title": "Inventory Application Home",
        "item_count": num_items,
        "category_count": num_categories,
    })

async def item_list_logic(store: Store) -> View:
    docs = await store.items.find(projection=["name", "description", "category"], sort=BY_NAME)
    docs = await _populate(store, docs)
    return View(template="item_list", context={
        "title": "Item List",
        "item_list": [ItemListing(**d) for d in docs],
    })

async def item_detail_logic(store: Store, item_id: str) -> View:
    doc = await store.items.find_by_id(item_id)
    if doc is None:
        raise HTTPException(status_code=404, detail="Item not found")
    [doc] = await _populate(store, [doc])
    return View(template="item_detail", context={"title": "Item Detail", "item": ItemDetail(**doc)})

async def item_create_get_logic(store: Store) -> View:
    docs = await store.categories.find(sort=BY_NAME)
    return View(template="item_form", context={
        "title": "Create Item",
        "item": None,
        "categories": _choices(docs, []),
        "errors": [],
    })

async def _item_form_errors(store: Store, title: str, data: Dict[str, Any], errors) -> View:
    values = form_values(data)
    docs = await store.categories.find(sort=BY_NAME)
    return View(template="item_form", context={
        "title": title,
        "item": values,
        "categories": _choices(docs, values["category"]),
        "errors": errors,
    })

async def item_create_post_logic(store: Store, data: Dict[str, Any]):
    data = dict(data, category=normalize_category(data.get("category")))
    form, errors = validate_form(ItemIn, data)
    if errors:
        return await _item_form_errors(store, "Create Item", data, errors)

    doc = await store.items.insert_one(form.model_dump())
    item = Item(**doc)
    logger.info("created item %s (%s)", item.id, item.name)
    return Redirect(url=item.url)

async def item_delete_get_logic(store: Store, item_id: str):
    doc = await store.items.find_by_id(item_id)
    if doc is None:
        return Redirect(url=ITEM_LIST_URL)
    return View(template="item_delete", context={"title": "Delete Item", "item": Item(**doc)})

async def item_delete_post_logic(store: Store, item_id: str) -> Redirect:
    await store.items.find_by_id_and_delete(item_id)
    logger.info("deleted item %s", item_id)
    return Redirect(url=ITEM_LIST_URL)

async def item_update_get_logic(store: Store, item_id: str) -> View:
    doc, category_docs = await asyncio.gather(
        store.items.find_by_id(item_id),
        store.categories.find(sort=BY_NAME),
    )
    if doc is None:
        raise HTTPException(status_code=404, detail="Item not found")
    item = Item(**doc)
    return View(template="item_form", context={
        "title": "Update Item",
        "item": item,
        "categories": _choices(category_docs, item.category),
        "errors": [],
    })

async def item_update_post_logic(store: Store, item_id: str, data: Dict[str, Any]):
    if await store.items.find_by_id(item_id) is None:
        raise HTTPException(status_code=404, detail="Item not found")
    data = dict(data, category=normalize_category(data.get("category")))
    form, errors = validate_form(ItemIn, data)
    if errors:
        return await _item_form_errors(store, "Update Item", data, errors)

    doc = await store.items.find_by_id_and_update(item_id, form.model_dump())
    if doc is None:
        raise HTTPException(status_code=404, detail="Item not found")
    item = Item(**doc)
    logger.info("updated item %s", item.id)
    return Redirect(url=item.url)
