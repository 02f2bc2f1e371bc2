"""Caller-defined extension fields shared by Header and Payload."""
from typing import Any, TypeVar

from pydantic import BaseModel, PydanticSchemaGenerationError, TypeAdapter, ValidationError

from compactjwt.errors import InvalidExtension, ReservedFieldCollision

# Header and Token share H; Payload and Token share C. Reusing the same
# TypeVar objects lets Token[H, C] resolve its fields back to the plain models.
H = TypeVar("H")
C = TypeVar("C")


def extension_fields(value: Any) -> dict[str, Any]:
    """Dump an extension value to the JSON object it contributes to a segment."""
    if value is None:
        return {}
    try:
        if isinstance(value, BaseModel):
            fields = value.model_dump(mode="json", by_alias=True)
        else:
            fields = TypeAdapter(type(value)).dump_python(value, mode="json")
    except (PydanticSchemaGenerationError, ValueError) as exc:
        raise InvalidExtension(f"cannot serialize extension {type(value).__name__}: {exc}") from exc
    if not isinstance(fields, dict):
        raise InvalidExtension(
            f"extension {type(value).__name__} serializes to {type(fields).__name__}, not a JSON object"
        )
    return fields


def check_reserved(fields: dict[str, Any], reserved: frozenset[str]) -> None:
    collisions = sorted(reserved.intersection(fields))
    if collisions:
        raise ReservedFieldCollision(collisions)


def empty_extension(model: type[BaseModel]) -> Any:
    """
    Extension value for a segment that carries no extra fields.
    A model parametrized with a type that accepts ``{}`` (a model without
    required fields, a dict) gets that empty value back; otherwise None.
    """
    args = model.__pydantic_generic_metadata__["args"]
    if not args or isinstance(args[0], TypeVar):
        return None
    try:
        return TypeAdapter(args[0]).validate_python({})
    except ValidationError:
        return None
