"""JSON serializer that preserves non-JSON-native Python types.

Values are written as ``{"json": <plain JSON>, "meta": [[path, tag], ...]}``.
The plain JSON tree holds every value in a JSON-compatible form; ``meta``
records, per path, which Python type a node must be restored to. Keeping the
annotations outside the data means user dictionaries never collide with
type markers.

Example:
    >>> codec = RichJsonCodec()
    >>> text = await codec.encode({"at": datetime(2025, 1, 15, tzinfo=UTC)})
    >>> text
    '{"json":{"at":"2025-01-15T00:00:00+00:00"},"meta":[[["at"],"datetime"]]}'
"""

from __future__ import annotations

import base64
import binascii
import json
import math
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from keyset_pagination.core.codec.base import Codec
from keyset_pagination.core.exceptions import CodecError

# Largest integer a double-precision consumer can represent exactly.
MAX_SAFE_INTEGER = 2**53 - 1

Path = list[str | int]


def _decode_number(raw: str) -> float:
    if raw not in ("NaN", "Infinity", "-Infinity"):
        raise ValueError(f"not a non-finite number: {raw!r}")
    return float(raw.replace("Infinity", "inf"))


def _require(kind: type, convert: Callable[[Any], Any]) -> Callable[[Any], Any]:
    def checked(raw: Any) -> Any:
        if not isinstance(raw, kind):
            raise TypeError(f"expected {kind.__name__}, got {type(raw).__name__}")
        return convert(raw)

    return checked


def _decode_timedelta(raw: list[int]) -> timedelta:
    days, seconds, microseconds = raw
    return timedelta(days=days, seconds=seconds, microseconds=microseconds)


_DECODERS: dict[str, Callable[[Any], Any]] = {
    "bigint": _require(str, int),
    "number": _require(str, _decode_number),
    "datetime": _require(str, datetime.fromisoformat),
    "date": _require(str, date.fromisoformat),
    "time": _require(str, time.fromisoformat),
    "timedelta": _require(list, _decode_timedelta),
    "decimal": _require(str, Decimal),
    "uuid": _require(str, UUID),
    "bytes": _require(str, lambda raw: base64.b64decode(raw, validate=True)),
    "tuple": _require(list, tuple),
    "set": _require(list, set),
    "frozenset": _require(list, frozenset),
}


class RichJsonCodec(Codec[object, str]):
    """Serialize structured values to JSON text and restore them exactly.

    Supported leaf types: ``None``, ``bool``, ``int`` (any size), ``float``
    (including NaN and infinities), ``str``, ``datetime``, ``date``, ``time``,
    ``timedelta``, ``Decimal``, ``UUID`` and ``bytes``. Supported containers:
    ``dict`` with string keys, ``list``, ``tuple``, ``set`` and ``frozenset``.
    """

    input_type = object
    output_type = str

    async def encode(self, value: object) -> str:
        meta: list[list[Any]] = []
        plain = self._walk(value, [], meta)
        document: dict[str, Any] = {"json": plain}
        if meta:
            document["meta"] = meta
        return json.dumps(document, separators=(",", ":"), ensure_ascii=False, allow_nan=False)

    async def decode(self, value: str) -> object:
        if not isinstance(value, str):
            raise CodecError(f"RichJsonCodec expects str, got {type(value).__name__}")
        try:
            document = json.loads(value)
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and the int digit limit
            raise CodecError(f"Malformed JSON payload: {type(e).__name__}") from e

        if not isinstance(document, dict) or "json" not in document:
            raise CodecError("Payload is missing the 'json' member")
        if set(document) - {"json", "meta"}:
            raise CodecError("Payload has unexpected members")

        root = document["json"]
        meta = document.get("meta", [])
        if not isinstance(meta, list):
            raise CodecError("Payload 'meta' must be a list")

        annotations = [self._check_annotation(entry) for entry in meta]
        # Children are restored before the containers that hold them.
        annotations.sort(key=lambda entry: len(entry[0]), reverse=True)

        for path, tag in annotations:
            try:
                root = self._restore(root, path, _DECODERS[tag])
            except (KeyError, IndexError, TypeError, ValueError, InvalidOperation, binascii.Error) as e:
                raise CodecError(f"Cannot restore {tag!r} at {path!r}: {e}") from e
        return root

    def _walk(self, value: Any, path: Path, meta: list[list[Any]]) -> Any:
        """Convert ``value`` to plain JSON, recording type tags in post-order."""
        if value is None or isinstance(value, (bool, str)):
            return value

        if isinstance(value, int):
            if abs(value) > MAX_SAFE_INTEGER:
                meta.append([list(path), "bigint"])
                return str(value)
            return int(value)

        if isinstance(value, float):
            if math.isfinite(value):
                return value
            meta.append([list(path), "number"])
            return "NaN" if math.isnan(value) else ("Infinity" if value > 0 else "-Infinity")

        if isinstance(value, dict):
            result = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise CodecError(
                        f"Dictionary keys must be str, got {type(key).__name__} at {path!r}"
                    )
                result[key] = self._walk(item, [*path, key], meta)
            return result

        if isinstance(value, list):
            return [self._walk(item, [*path, i], meta) for i, item in enumerate(value)]

        if isinstance(value, (tuple, set, frozenset)):
            items = [self._walk(item, [*path, i], meta) for i, item in enumerate(value)]
            if isinstance(value, frozenset):
                tag = "frozenset"
            elif isinstance(value, set):
                tag = "set"
            else:
                tag = "tuple"
            meta.append([list(path), tag])
            return items

        tag, plain = self._encode_scalar(value, path)
        meta.append([list(path), tag])
        return plain

    @staticmethod
    def _encode_scalar(value: Any, path: Path) -> tuple[str, Any]:
        # datetime is a date subclass, so it is checked first
        if isinstance(value, datetime):
            return "datetime", value.isoformat()
        if isinstance(value, date):
            return "date", value.isoformat()
        if isinstance(value, time):
            return "time", value.isoformat()
        if isinstance(value, timedelta):
            return "timedelta", [value.days, value.seconds, value.microseconds]
        if isinstance(value, Decimal):
            return "decimal", str(value)
        if isinstance(value, UUID):
            return "uuid", str(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return "bytes", base64.b64encode(bytes(value)).decode("ascii")
        raise CodecError(f"Cannot serialize value of type {type(value).__name__} at {path!r}")

    @staticmethod
    def _check_annotation(entry: Any) -> tuple[Path, str]:
        if (
            not isinstance(entry, list)
            or len(entry) != 2
            or not isinstance(entry[0], list)
            or not all(isinstance(seg, (str, int)) and not isinstance(seg, bool) for seg in entry[0])
            or entry[1] not in _DECODERS
        ):
            raise CodecError(f"Malformed type annotation: {entry!r}")
        return entry[0], entry[1]

    @staticmethod
    def _restore(root: Any, path: Path, convert: Callable[[Any], Any]) -> Any:
        if not path:
            return convert(root)

        parent = root
        for segment in path[:-1]:
            parent = parent[segment]
        last = path[-1]
        if isinstance(parent, dict) != isinstance(last, str):
            raise TypeError(f"path segment {last!r} does not match container")
        parent[last] = convert(parent[last])
        return root


__all__ = ["MAX_SAFE_INTEGER", "RichJsonCodec"]
