"""Demo Routes — handlers that end requests by raising signals from nested helpers.

Invariants:
    - No handler receives or returns a response object for its early exits;
      every early exit is a raised signal
    - Helpers raise; route functions only describe the happy path

Design Decisions:
    - In-memory user table: the routes exist to exercise the pipeline, not to
      store anything
"""

import logging

from fastapi import APIRouter, Request

from throwres.core.boundary_protocols import Continuation, ResponseSink
from throwres.core.domain_types import RedirectStatus
from throwres.core.signals import (
    JsonSignal, RedirectSignal, ResponseSignal, status_signal, text_signal,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/demo", tags=["demo"])

_USERS = {
    "1": {"id": "1", "name": "Ada", "role": "admin"},
    "2": {"id": "2", "name": "Grace", "role": "member"},
}


def _find_user(user_id: str) -> dict:
    user = _USERS.get(user_id)
    if user is None:
        raise JsonSignal({"error": "Not found"}, 404)
    return user


def _load_profile(user_id: str) -> dict:
    user = _find_user(user_id)
    return {"id": user["id"], "name": user["name"]}


def _require_admin(user_id: str | None) -> dict:
    if user_id is None:
        raise RedirectSignal("/login")
    user = _find_user(user_id)
    if user["role"] != "admin":
        raise RedirectSignal("/login", RedirectStatus.SEE_OTHER)
    return user


async def _write_teapot(
    request: Request, sink: ResponseSink, continuation: Continuation,
) -> None:
    sink.set_status(418)
    sink.set_header("x-brewed-for", request.url.path)
    sink.write_body("I'm a teapot", media_type="text/plain")


@router.get("/users/{user_id}")
async def get_user(user_id: str):
    return _load_profile(user_id)


@router.get("/admin")
async def admin_dashboard(user_id: str | None = None):
    user = _require_admin(user_id)
    return {"dashboard": "admin", "user": user["name"]}


@router.get("/old-users/{user_id}")
async def moved_user(request: Request, user_id: str):
    """Permanently moved: the locator is a starlette URL, not a str."""
    raise RedirectSignal(
        request.url_for("get_user", user_id=user_id),
        RedirectStatus.MOVED_PERMANENTLY,
    )


@router.get("/teapot")
async def teapot():
    raise ResponseSignal(_write_teapot, "Teapot response")


@router.get("/notice")
async def notice():
    raise text_signal(
        "Plain text response", headers={"cache-control": "no-cache"},
    )


@router.delete("/users/{user_id}")
async def delete_user(user_id: str):
    _find_user(user_id)
    raise status_signal(204)


@router.get("/broken")
async def broken():
    """Ordinary exceptions are forwarded to the catch-all handler."""
    raise RuntimeError("storage backend unavailable")


@router.get("/cyclic")
async def cyclic():
    """Unserializable payloads fail at dispatch, not at raise."""
    node: dict = {"name": "root"}
    node["self"] = node
    raise JsonSignal(node)
