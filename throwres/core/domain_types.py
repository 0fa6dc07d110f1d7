"""Domain Types — enums and aliases shared by signals, sinks and the interceptor.

Invariants:
    - SignalKind is closed: REDIRECT, JSON, CUSTOM (bare ResponseSignal)
    - RedirectStatus enumerates every redirect code a RedirectSignal accepts
    - JsonValue mirrors the JSON grammar: str, number, bool, None, list, str-keyed dict

Design Decisions:
    - IntEnum for redirect codes: members compare equal to plain ints, so
      RedirectStatus.FOUND == 302 and sinks receive ordinary status codes
    - str Enum for SignalKind: serializes into log records without custom encoders
"""

from enum import Enum, IntEnum
from typing import Union


DEFAULT_SIGNAL_MESSAGE = "Not an error: response thrown"


class SignalKind(str, Enum):
    """Built-in response kinds. Observability only, never a control decision."""
    REDIRECT = "redirect"
    JSON = "json"
    CUSTOM = "custom"


class RedirectStatus(IntEnum):
    """Status codes a RedirectSignal may carry."""
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308


REDIRECT_STATUS_CODES = frozenset(int(s) for s in RedirectStatus)


JsonValue = Union[
    str, int, float, bool, None,
    list["JsonValue"],
    dict[str, "JsonValue"],
]
