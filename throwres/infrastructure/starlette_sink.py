"""Starlette Response Sink — buffers one response and materializes it for Starlette.

Invariants:
    - Exactly one of write_body / write_json / write_redirect resolves the sink
    - Any write after resolution raises ResponseAlreadyResolvedError
    - to_response() on an unresolved sink raises UnresolvedResponseError
    - JSON is rendered exactly like starlette.responses.JSONResponse
      (compact separators, ensure_ascii=False, allow_nan=False)

Design Decisions:
    - Buffer then build: terminal actions stay sync and host-agnostic, the
      exception handler returns the built Response (ADR: Starlette handlers
      must return a Response, they cannot write to the socket)
    - Serialization failures wrapped in PayloadSerializationError at write time,
      never at signal construction
"""

import json
from urllib.parse import quote

from starlette.responses import Response

from throwres.core.domain_types import JsonValue
from throwres.core.errors import (
    PayloadSerializationError, ResponseAlreadyResolvedError,
    UnresolvedResponseError,
)

JSON_MEDIA_TYPE = "application/json"

# Same safe set as starlette.responses.RedirectResponse
_LOCATION_SAFE_CHARS = ":/%#?=@[]!$&'()*+,;"


def render_json(value: JsonValue) -> bytes:
    """Canonical JSON bytes for value. Raises PayloadSerializationError."""
    try:
        return json.dumps(
            value,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")
    except (TypeError, ValueError, RecursionError) as e:
        raise PayloadSerializationError(str(e)) from e


class StarletteResponseSink:
    """ResponseSink that produces a starlette Response once resolved."""

    def __init__(self):
        self._status_code = 200
        self._headers: dict[str, str] = {}
        self._body = b""
        self._media_type: str | None = None
        self._resolved = False

    @property
    def resolved(self) -> bool:
        return self._resolved

    @property
    def status_code(self) -> int:
        return self._status_code

    def set_status(self, status_code: int) -> None:
        self._ensure_open("set status")
        self._status_code = status_code

    def set_header(self, name: str, value: str) -> None:
        self._ensure_open(f"set header {name!r}")
        self._headers[name.lower()] = value

    def write_body(
        self, content: str | bytes, media_type: str | None = None,
    ) -> None:
        self._ensure_open("write body")
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._resolve(content, media_type)

    def write_json(self, value: JsonValue) -> None:
        self._ensure_open("write json")
        self._resolve(render_json(value), JSON_MEDIA_TYPE)

    def write_redirect(self, status_code: int, location: str) -> None:
        self._ensure_open("write redirect")
        self._status_code = status_code
        self._headers["location"] = quote(location, safe=_LOCATION_SAFE_CHARS)
        self._resolve(b"", None)

    def to_response(self) -> Response:
        if not self._resolved:
            raise UnresolvedResponseError("sink was never written")
        return Response(
            content=self._body,
            status_code=self._status_code,
            headers=self._headers,
            media_type=self._media_type,
        )

    def _ensure_open(self, operation: str) -> None:
        if self._resolved:
            raise ResponseAlreadyResolvedError(operation)

    def _resolve(self, body: bytes, media_type: str | None) -> None:
        self._body = body
        self._media_type = media_type
        self._resolved = True
