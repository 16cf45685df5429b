# tests/test_items.py
import asyncio
from fastapi.testclient import TestClient
from app.main import app
from app.database import STORE

client = TestClient(app, follow_redirects=False)

def setup_function():
    STORE.reset()

def stored_item(item_id):
    return asyncio.run(STORE.items.find_by_id(item_id))

def make_category(name):
    r = client.post("/inventory/category/create", data={"name": name})
    return r.headers["location"].rsplit("/", 1)[-1]

def create_item(**fields):
    data = {"name": "Beret", "price": "12.5", "stock": "3"}
    data.update(fields)
    return client.post("/inventory/item/create", data=data)

def created_id(r):
    assert r.status_code == 302
    return r.headers["location"].rsplit("/", 1)[-1]

def test_index_counts():
    make_category("Hats")
    create_item()
    create_item(name="Cap")
    body = client.get("/inventory/").json()
    assert body["template"] == "index"
    assert body["item_count"] == 2
    assert body["category_count"] == 1

def test_create_form_lists_categories_unchecked():
    make_category("Shoes")
    make_category("Hats")
    body = client.get("/inventory/item/create").json()
    assert body["template"] == "item_form"
    assert [c["name"] for c in body["categories"]] == ["Hats", "Shoes"]
    assert not any(c["checked"] for c in body["categories"])

def test_create_without_category_stores_empty_list():
    iid = created_id(create_item())
    doc = stored_item(iid)
    assert doc["category"] == []
    assert doc["price"] == 12.5
    assert doc["stock"] == 3

def test_create_with_single_category():
    cid = make_category("Hats")
    iid = created_id(create_item(category=cid))
    assert stored_item(iid)["category"] == [cid]

def test_create_with_several_categories_keeps_order():
    hats = make_category("Hats")
    sale = make_category("Sale")
    iid = created_id(create_item(category=[sale, hats]))
    assert stored_item(iid)["category"] == [sale, hats]

def test_create_from_json_body():
    cid = make_category("Hats")
    r = client.post("/inventory/item/create", json={"name": "Beret", "price": 4, "stock": 2, "category": cid})
    assert stored_item(created_id(r))["category"] == [cid]

def test_create_redirects_to_item_url():
    r = create_item()
    assert r.headers["location"] == f"/item/{created_id(r)}"

def test_create_with_non_numeric_price():
    r = create_item(price="cheap")
    assert r.status_code == 200
    body = r.json()
    assert body["template"] == "item_form"
    assert [e["path"] for e in body["errors"]] == ["price"]
    assert body["errors"][0]["msg"] == "Price must be a number."
    assert asyncio.run(STORE.items.count_documents()) == 0

def test_create_with_non_numeric_stock():
    body = create_item(stock="lots").json()
    assert [e["path"] for e in body["errors"]] == ["stock"]
    assert asyncio.run(STORE.items.count_documents()) == 0

def test_create_with_missing_fields_reports_each():
    r = client.post("/inventory/item/create", data={"description": "nothing else"})
    paths = [e["path"] for e in r.json()["errors"]]
    assert paths == ["name", "price", "stock"]

def test_negative_price_rejected():
    body = create_item(price="-1").json()
    assert body["errors"][0]["msg"] == "Price must not be negative."

def test_failed_create_marks_submitted_categories_checked():
    hats = make_category("Hats")
    shoes = make_category("Shoes")
    body = create_item(name="", category=hats).json()
    checked = {c["id"]: c["checked"] for c in body["categories"]}
    assert checked == {hats: True, shoes: False}
    assert body["item"]["category"] == [hats]

def test_list_sorted_and_populated():
    hats = make_category("Hats")
    create_item(name="Trilby", category=hats)
    create_item(name="Beret", category=hats)
    create_item(name="Sock")
    body = client.get("/inventory/items").json()
    assert [it["name"] for it in body["item_list"]] == ["Beret", "Sock", "Trilby"]
    beret = body["item_list"][0]
    assert [c["name"] for c in beret["category"]] == ["Hats"]
    assert "price" not in beret

def test_detail_populates_categories():
    hats = make_category("Hats")
    iid = created_id(create_item(category=hats, description="French"))
    body = client.get(f"/inventory/item/{iid}").json()
    assert body["template"] == "item_detail"
    item = body["item"]
    assert item["description"] == "French"
    assert item["url"] == f"/item/{iid}"
    assert item["category"][0]["id"] == hats
    assert item["category"][0]["url"] == f"/category/{hats}"

def test_detail_missing_is_not_found():
    r = client.get("/inventory/item/doesnotexist")
    assert r.status_code == 404
    assert r.json()["message"] == "Item not found"

def test_delete_form_for_missing_item_redirects():
    r = client.get("/inventory/item/doesnotexist/delete")
    assert r.status_code == 302
    assert r.headers["location"] == "/inventory/items"

def test_delete_form_shows_item():
    iid = created_id(create_item())
    body = client.get(f"/inventory/item/{iid}/delete").json()
    assert body["template"] == "item_delete"
    assert body["item"]["id"] == iid

def test_delete():
    iid = created_id(create_item())
    r = client.post(f"/inventory/item/{iid}/delete", data={"itemid": iid})
    assert r.status_code == 302
    assert r.headers["location"] == "/inventory/items"
    assert stored_item(iid) is None

def test_deleting_last_item_frees_category():
    cid = make_category("Hats")
    iid = created_id(create_item(category=cid))
    client.post(f"/inventory/item/{iid}/delete", data={"itemid": iid})
    r = client.post(f"/inventory/category/{cid}/delete", data={"categoryid": cid})
    assert r.status_code == 302

def test_update_form_marks_item_categories():
    hats = make_category("Hats")
    shoes = make_category("Shoes")
    iid = created_id(create_item(category=shoes))
    body = client.get(f"/inventory/item/{iid}/update").json()
    assert body["title"] == "Update Item"
    assert body["item"]["name"] == "Beret"
    assert {c["id"]: c["checked"] for c in body["categories"]} == {hats: False, shoes: True}

def test_update_form_missing_item():
    assert client.get("/inventory/item/doesnotexist/update").status_code == 404

def test_update_preserves_id_and_replaces_fields():
    hats = make_category("Hats")
    iid = created_id(create_item(category=hats, description="old"))
    r = client.post(f"/inventory/item/{iid}/update", data={"name": "Cap", "price": "3", "stock": "9"})
    assert r.status_code == 302
    assert r.headers["location"] == f"/item/{iid}"
    doc = stored_item(iid)
    assert doc == {"id": iid, "name": "Cap", "description": None, "price": 3.0, "stock": 9, "category": []}
    assert asyncio.run(STORE.items.count_documents()) == 1

def test_update_with_invalid_fields_keeps_record():
    hats = make_category("Hats")
    iid = created_id(create_item(category=hats))
    r = client.post(f"/inventory/item/{iid}/update", data={"name": "Cap", "price": "x", "stock": "1", "category": hats})
    body = r.json()
    assert body["template"] == "item_form"
    assert body["title"] == "Update Item"
    assert [e["path"] for e in body["errors"]] == ["price"]
    assert body["categories"][0]["checked"] is True
    assert stored_item(iid)["name"] == "Beret"

def test_update_missing_item():
    r = client.post("/inventory/item/doesnotexist/update", data={"name": "Cap", "price": "3", "stock": "9"})
    assert r.status_code == 404

def test_create_with_huge_price_is_rejected():
    body = create_item(price="9" * 400).json()
    assert [e["path"] for e in body["errors"]] == ["price"]
    assert asyncio.run(STORE.items.count_documents()) == 0

def test_create_from_json_with_small_price():
    r = client.post("/inventory/item/create", json={"name": "Pin", "price": 0.00001, "stock": 1})
    iid = created_id(r)
    assert stored_item(iid)["price"] == 0.00001
    assert client.get(f"/inventory/item/{iid}").json()["item"]["price"] == 0.00001

def test_update_missing_item_with_invalid_fields():
    r = client.post("/inventory/item/doesnotexist/update", data={"name": "", "price": "x", "stock": "1"})
    assert r.status_code == 404
    assert r.json()["message"] == "Item not found"
