# tests/test_core.py
from app.core import CategoryIn, ItemIn, form_values, normalize_category, sanitize, validate_form

def test_normalize_category():
    assert normalize_category(None) == []
    assert normalize_category("abc") == ["abc"]
    assert normalize_category(["a", "b"]) == ["a", "b"]
    assert normalize_category([]) == []

def test_sanitize_trims_and_escapes():
    assert sanitize("  <i>x</i> ") == "&lt;i&gt;x&lt;/i&gt;"
    assert sanitize('"quoted" & \'single\'') == "&quot;quoted&quot; &amp; &#x27;single&#x27;"
    assert sanitize(None) is None
    assert sanitize(12.5) == "12.5"

def test_category_form_valid():
    form, errors = validate_form(CategoryIn, {"name": " Hats ", "description": ""})
    assert errors == []
    assert form.name == "Hats"
    assert form.description is None

def test_category_form_missing_name():
    form, errors = validate_form(CategoryIn, {})
    assert form is None
    assert [(e.path, e.msg) for e in errors] == [("name", "Name must not be empty.")]

def test_item_form_numbers():
    form, errors = validate_form(ItemIn, {"name": "Cap", "price": " 29.99 ", "stock": "+4", "category": ["a"]})
    assert errors == []
    assert form.price == 29.99
    assert form.stock == 4
    assert form.category == ["a"]

def test_item_form_rejects_odd_numbers():
    for price in ("1e5", "nan", "1,5", "12."):
        _, errors = validate_form(ItemIn, {"name": "Cap", "price": price, "stock": "1"})
        assert [e.msg for e in errors] == ["Price must be a number."], price

    _, errors = validate_form(ItemIn, {"name": "Cap", "price": "1", "stock": "1.5"})
    assert [e.msg for e in errors] == ["Stock must be a whole number."]

def test_item_form_error_keeps_submitted_value():
    _, errors = validate_form(ItemIn, {"name": "Cap", "price": "cheap", "stock": "1"})
    assert errors[0].value == "cheap"

def test_form_values():
    values = form_values({"name": " <b> ", "category": "abc"})
    assert values == {"name": "&lt;b&gt;", "category": ["abc"]}

def test_item_form_rejects_overflowing_price():
    _, errors = validate_form(ItemIn, {"name": "Cap", "price": "9" * 400, "stock": "1"})
    assert [e.msg for e in errors] == ["Price must be a number."]
    _, errors = validate_form(ItemIn, {"name": "Cap", "price": 10 ** 400, "stock": "1"})
    assert [e.msg for e in errors] == ["Price must be a number."]
    _, errors = validate_form(ItemIn, {"name": "Cap", "price": float("inf"), "stock": "1"})
    assert [e.msg for e in errors] == ["Price must be a number."]

def test_item_form_accepts_json_numbers():
    form, errors = validate_form(ItemIn, {"name": "Pin", "price": 0.00001, "stock": 2})
    assert errors == []
    assert form.price == 0.00001
    assert form.stock == 2
    form, errors = validate_form(ItemIn, {"name": "Pin", "price": 1e16, "stock": 3.0})
    assert errors == []
    assert form.price == 1e16
    assert form.stock == 3

def test_item_form_checks_json_numbers():
    _, errors = validate_form(ItemIn, {"name": "Pin", "price": -0.5, "stock": 1.5})
    assert [e.msg for e in errors] == ["Price must not be negative.", "Stock must be a whole number."]
    _, errors = validate_form(ItemIn, {"name": "Pin", "price": True, "stock": 1})
    assert [e.msg for e in errors] == ["Price must be a number."]
