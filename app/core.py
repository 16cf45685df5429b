import html
import math
import re
from typing import Optional, Dict, Any, List, Tuple, Type, Union

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

_NUMBER = re.compile(r"^[+-]?([0-9]*[.])?[0-9]+$")
_INTEGER = re.compile(r"^[+-]?[0-9]+$")

# ---------------------------
# Workflow results
# ---------------------------
class View(BaseModel):
    template: str
    context: Dict[str, Any] = {}

class Redirect(BaseModel):
    url: str

class FieldError(BaseModel):
    path: str
    msg: str
    value: Any = None

# ---------------------------
# Sanitization helpers
# ---------------------------
def sanitize(value: Any) -> Optional[str]:
    """Trim and HTML-escape a submitted value.

    Repeated form keys arrive as a list; the last one wins for scalar fields.
    """
    if isinstance(value, list):
        value = value[-1] if value else None
    if value is None:
        return None
    return html.escape(str(value).strip())

def normalize_category(value: Union[None, str, List[str], Tuple[str, ...]]) -> List[str]:
    # absent -> [], one value -> [value], many -> unchanged
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]

def form_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Sanitized copy of a submitted form, used to pre-fill a re-rendered form."""
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "category":
            out[key] = [sanitize(v) for v in normalize_category(value)]
        else:
            out[key] = sanitize(value)
    return out

def _required(value: Any, label: str) -> str:
    cleaned = sanitize(value)
    if not cleaned:
        raise PydanticCustomError("empty", "{label} must not be empty.", {"label": label})
    return cleaned

def _is_number(value: Any) -> bool:
    # JSON bodies carry real numbers; form fields are always strings
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def _optional(value: Any) -> Optional[str]:
    cleaned = sanitize(value)
    return cleaned or None

# ---------------------------
# Form schemas
# ---------------------------
class CategoryIn(BaseModel):
    name: str = Field(default="", validate_default=True)
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v):
        return _required(v, "Name")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return _optional(v)

class ItemIn(BaseModel):
    name: str = Field(default="", validate_default=True)
    description: Optional[str] = None
    price: float = Field(default=None, validate_default=True)
    stock: int = Field(default=None, validate_default=True)
    category: List[str] = []

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v):
        return _required(v, "Name")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return _optional(v)

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, v):
        if _is_number(v):
            try:
                price = float(v)
            except OverflowError:
                raise PydanticCustomError("not_numeric", "Price must be a number.")
        else:
            raw = _required(v, "Price")
            if not _NUMBER.match(raw):
                raise PydanticCustomError("not_numeric", "Price must be a number.")
            price = float(raw)
        # very long digit strings overflow to inf
        if not math.isfinite(price):
            raise PydanticCustomError("not_numeric", "Price must be a number.")
        if price < 0:
            raise PydanticCustomError("negative", "Price must not be negative.")
        return price

    @field_validator("stock", mode="before")
    @classmethod
    def _stock(cls, v):
        if _is_number(v):
            if isinstance(v, float) and not v.is_integer():
                raise PydanticCustomError("not_numeric", "Stock must be a whole number.")
            stock = int(v)
        else:
            raw = _required(v, "Stock")
            if not _INTEGER.match(raw):
                raise PydanticCustomError("not_numeric", "Stock must be a whole number.")
            stock = int(raw)
        if stock < 0:
            raise PydanticCustomError("negative", "Stock must not be negative.")
        return stock

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return [sanitize(c) or "" for c in normalize_category(v)]

# ---------------------------
# Helpers
# ---------------------------
def validate_form(schema: Type[BaseModel], data: Dict[str, Any]) -> Tuple[Optional[BaseModel], List[FieldError]]:
    try:
        return schema.model_validate(data), []
    except ValidationError as exc:
        errors = [
            FieldError(path=".".join(str(p) for p in e["loc"]), msg=e["msg"], value=e.get("input"))
            for e in exc.errors()
        ]
        return None, errors
