# app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Union

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import configure_logging, get_settings
from .core import Redirect, View
from .database import Store, get_store
from .seed import seed_store
from . import logic

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_on_startup:
        await seed_store(get_store())
    yield


app = FastAPI(title="inventory", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = APIRouter(prefix="/inventory")


# ---------------------------
# Presentation adapter
# ---------------------------
def render(result: Union[View, Redirect]):
    if isinstance(result, Redirect):
        return RedirectResponse(result.url, status_code=302)
    return JSONResponse(jsonable_encoder({"template": result.template, **result.context}))


async def read_body(request: Request) -> Dict[str, Any]:
    # Browser forms send repeated keys for multi-selects; keep those as lists
    # and everything else as single values.
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Request body must be valid JSON")
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Request body must be an object")
        return payload
    form = await request.form()
    data: Dict[str, Any] = {}
    for key in form.keys():
        values = form.getlist(key)
        data[key] = values if len(values) > 1 else values[0]
    return data


# ---------------------------
# Error handlers
# ---------------------------
@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        {"template": "error", "title": "Error", "message": exc.detail, "status": exc.status_code},
        status_code=exc.status_code,
    )


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    body = {"template": "error", "title": "Error", "status": 500}
    if settings.is_production:
        body["message"] = "Internal Server Error"
    else:
        body["message"] = str(exc)
        body["error"] = type(exc).__name__
    return JSONResponse(body, status_code=500)


# ---------------------------
# Index
# ---------------------------
@app.get("/")
async def home():
    return RedirectResponse("/inventory/", status_code=302)

@app.get("/health")
async def health():
    return {"status": "ok"}

@router.get("/")
async def index(store: Store = Depends(get_store)):
    return render(await logic.index_logic(store))


# ---------------------------
# Category routes
# ---------------------------
@router.get("/categories")
async def category_list(store: Store = Depends(get_store)):
    return render(await logic.category_list_logic(store))

@router.get("/category/create")
async def category_create_get():
    return render(await logic.category_create_get_logic())

@router.post("/category/create")
async def category_create_post(request: Request, store: Store = Depends(get_store)):
    data = await read_body(request)
    return render(await logic.category_create_post_logic(store, data))

@router.get("/category/{category_id}/delete")
async def category_delete_get(category_id: str, store: Store = Depends(get_store)):
    return render(await logic.category_delete_get_logic(store, category_id))

@router.post("/category/{category_id}/delete")
async def category_delete_post(category_id: str, request: Request, store: Store = Depends(get_store)):
    data = await read_body(request)
    if data.get("categoryid") not in (None, category_id):
        raise HTTPException(status_code=400, detail="categoryid does not match the url")
    return render(await logic.category_delete_post_logic(store, category_id))

@router.get("/category/{category_id}/update", response_class=PlainTextResponse)
async def category_update_get(category_id: str):
    return await logic.category_update_get_logic(category_id)

@router.post("/category/{category_id}/update", response_class=PlainTextResponse)
async def category_update_post(category_id: str):
    return await logic.category_update_post_logic(category_id)

@router.get("/category/{category_id}")
async def category_detail(category_id: str, store: Store = Depends(get_store)):
    return render(await logic.category_detail_logic(store, category_id))


# ---------------------------
# Item routes
# ---------------------------
@router.get("/items")
async def item_list(store: Store = Depends(get_store)):
    return render(await logic.item_list_logic(store))

@router.get("/item/create")
async def item_create_get(store: Store = Depends(get_store)):
    return render(await logic.item_create_get_logic(store))

@router.post("/item/create")
async def item_create_post(request: Request, store: Store = Depends(get_store)):
    data = await read_body(request)
    return render(await logic.item_create_post_logic(store, data))

@router.get("/item/{item_id}/delete")
async def item_delete_get(item_id: str, store: Store = Depends(get_store)):
    return render(await logic.item_delete_get_logic(store, item_id))

@router.post("/item/{item_id}/delete")
async def item_delete_post(item_id: str, request: Request, store: Store = Depends(get_store)):
    data = await read_body(request)
    if data.get("itemid") not in (None, item_id):
        raise HTTPException(status_code=400, detail="itemid does not match the url")
    return render(await logic.item_delete_post_logic(store, item_id))

@router.get("/item/{item_id}/update")
async def item_update_get(item_id: str, store: Store = Depends(get_store)):
    return render(await logic.item_update_get_logic(store, item_id))

@router.post("/item/{item_id}/update")
async def item_update_post(item_id: str, request: Request, store: Store = Depends(get_store)):
    data = await read_body(request)
    return render(await logic.item_update_post_logic(store, item_id, data))

@router.get("/item/{item_id}")
async def item_detail(item_id: str, store: Store = Depends(get_store)):
    return render(await logic.item_detail_logic(store, item_id))


app.include_router(router)


# ---------------------------
# Entity urls
# ---------------------------
# Category.url and Item.url are relative to the site root; send them to the
# inventory pages.
@app.get("/category/{category_id}")
async def category_url(category_id: str):
    return RedirectResponse(f"/inventory/category/{category_id}", status_code=302)

@app.get("/item/{item_id}")
async def item_url(item_id: str):
    return RedirectResponse(f"/inventory/item/{item_id}", status_code=302)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
