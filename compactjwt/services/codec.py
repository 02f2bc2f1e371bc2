"""base64url and compact-JSON segment codec."""
import base64
import binascii
import json
import math
import re
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from compactjwt.errors import InvalidExtension, MalformedSegment

T = TypeVar("T")

_B64URL = re.compile(r"[A-Za-z0-9_-]*")


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(text: str) -> bytes:
    """
    Decode unpadded base64url.
    Rejects padding, foreign characters and non-canonical trailing bits, so a
    given byte string has exactly one accepted text form.
    """
    if not _B64URL.fullmatch(text) or len(text) % 4 == 1:
        raise MalformedSegment("segment is not valid base64url")
    try:
        data = base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
    except binascii.Error as exc:
        raise MalformedSegment("segment is not valid base64url") from exc
    if b64url_encode(data) != text:
        raise MalformedSegment("segment is not canonical base64url")
    return data


def _unique_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    fields = dict(pairs)
    if len(fields) != len(pairs):
        raise MalformedSegment("segment repeats a JSON member name")
    return fields


def _reject_constant(name: str) -> Any:
    raise MalformedSegment(f"segment contains non-standard JSON constant {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise MalformedSegment(f"segment contains out-of-range number {text[:32]}")
    return value


def encode_segment(value: Any) -> str:
    """Compact JSON of ``value`` (a model with ``to_json_object`` or a dict), base64url-encoded."""
    fields = value.to_json_object() if hasattr(value, "to_json_object") else value
    try:
        text = json.dumps(fields, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise InvalidExtension(f"segment is not JSON serializable: {exc}") from exc
    return b64url_encode(text.encode("utf-8"))


def decode_segment(text: str, target_type: type[T]) -> T:
    """
    Inverse of encode_segment.
    ``target_type`` either provides ``from_json_object`` (Header, Payload) or
    is anything a pydantic TypeAdapter can validate.
    """
    data = b64url_decode(text)
    try:
        fields = json.loads(
            data.decode("utf-8"),
            object_pairs_hook=_unique_keys,
            parse_constant=_reject_constant,
            parse_float=_finite_float,
        )
    except (ValueError, RecursionError) as exc:
        # ValueError covers bad UTF-8, bad JSON and integers past the digit limit.
        # RecursionError is nesting deeper than the decoder allows.
        raise MalformedSegment("segment is not valid JSON") from exc
    if not isinstance(fields, dict):
        raise MalformedSegment(f"segment is a JSON {type(fields).__name__}, expected an object")
    try:
        if hasattr(target_type, "from_json_object"):
            return target_type.from_json_object(fields)
        return TypeAdapter(target_type).validate_python(fields)
    except ValidationError as exc:
        raise MalformedSegment(
            f"segment does not match {getattr(target_type, '__name__', target_type)}: "
            f"{exc.error_count()} validation error(s)"
        ) from exc
