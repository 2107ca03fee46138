import asyncio
from typing import Optional

import requests
from fastapi import APIRouter, FastAPI, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from .config import Config, load_config
from .errors import UploadError
from .health import HEALTH_METHODS, ProbeTimeout, classify, probe
from .listing import all_tags, filter_items, sort_items
from .log import get_logger, set_level
from .models import REQUEST_CONTEXT, STORE_VERSION, DataWrite, SortMode, dump
from .service import LinkStore
from .storage import JsonFileStore
from .uploads import UPLOAD_URL_PREFIX, save_upload

logger = get_logger(__name__)

router = APIRouter()


def _config(request: Request) -> Config:
    return request.app.state.config


def _store(request: Request) -> LinkStore:
    return request.app.state.store


async def _view(request: Request, user: Optional[str]):
    user = user or _config(request).admin_user
    try:
        return await _store(request).read(user)
    except Exception:
        logger.exception("Failed to load data for %s", user)
        raise HTTPException(500, "failed to load")


@router.get("/healthz")
def healthz():
    return {"ok": True}


@router.get("/api/data")
async def read_data(request: Request, user: Optional[str] = None):
    view = await _view(request, user)
    return dump(view)


@router.post("/api/data")
async def write_data(request: Request, user: Optional[str] = None):
    if not user:
        raise HTTPException(400, "User must be specified for POST")
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(400, "invalid payload")
    if not isinstance(body, dict):
        raise HTTPException(400, "invalid payload")
    try:
        payload = DataWrite.model_validate(body, context=REQUEST_CONTEXT)
    except ValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(p) for p in first["loc"])
        raise HTTPException(400, f"invalid payload: {where}: {first['msg']}")

    try:
        await _store(request).write(user, payload)
    except Exception:
        logger.exception("Failed to save data for %s", user)
        raise HTTPException(500, "failed to save")
    return {"ok": True}


@router.get("/api/export")
async def export_data(request: Request, user: Optional[str] = None):
    view = await _view(request, user)
    return {
        "version": STORE_VERSION,
        "items": [dump(item) for item in view.items],
        "settings": dump(view.settings),
    }


@router.get("/api/links")
async def list_links(
    request: Request,
    user: Optional[str] = None,
    q: str = "",
    tag: str = "",
    favorite: bool = False,
    sort: Optional[SortMode] = None,
    expired_first: bool = True,
):
    view = await _view(request, user)
    found = filter_items(view.items, q=q, tag=tag, favorite_only=favorite)
    found = sort_items(found, sort or view.settings.sort_mode, expired_first=expired_first)
    return {
        "results": [dump(item) for item in found],
        "count": len(found),
        "tags": all_tags(view.items),
    }


@router.post("/api/upload")
async def upload(
    request: Request,
    file: Optional[UploadFile] = File(None),
    filename: Optional[str] = Form(None),
):
    if file is None:
        raise HTTPException(400, "file is required")
    content = await file.read()
    try:
        url = save_upload(_config(request).upload_dir, content, filename or file.filename)
    except UploadError as exc:
        raise HTTPException(400, str(exc))
    except OSError:
        logger.exception("Failed to store upload")
        raise HTTPException(500, "upload failed")
    return {"url": url}


@router.get("/api/health-proxy")
async def health_proxy(
    request: Request,
    url: Optional[str] = None,
    method: str = "HEAD",
    ok_min: int = Query(200, alias="okMin"),
):
    if not url:
        raise HTTPException(400, "URL is required")
    method = method.upper()
    if method not in HEALTH_METHODS:
        raise HTTPException(400, f"method must be one of {sorted(HEALTH_METHODS)}")

    timeout = _config(request).health_timeout
    try:
        result = await asyncio.get_running_loop().run_in_executor(
            None, probe, url, method, timeout
        )
    except ProbeTimeout:
        raise HTTPException(504, "Request timed out")
    except requests.RequestException as exc:
        logger.warning("Health probe of %s failed: %s", url, exc)
        raise HTTPException(500, "Failed to fetch")

    result["state"] = classify(result["status"], ok_min)
    return result


def create_app(config: Optional[Config] = None, store: Optional[LinkStore] = None) -> FastAPI:
    config = config or load_config()
    set_level(config.log_level)

    app = FastAPI(title="homelinks")
    app.state.config = config
    app.state.store = store or LinkStore(
        JsonFileStore(config.data_file), admin_user=config.admin_user
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    # uploaded logos; the directory is created on first upload
    app.mount(
        UPLOAD_URL_PREFIX,
        StaticFiles(directory=str(config.upload_dir), check_dir=False),
        name="uploads",
    )
    return app


app = create_app()
