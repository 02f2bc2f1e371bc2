"""JOSE header: the signing algorithm plus caller-defined header fields."""
from typing import Any, Generic

from pydantic import BaseModel, ConfigDict, Field, model_validator

from compactjwt.errors import MalformedSegment
from compactjwt.models.algorithm import Algorithm
from compactjwt.models.extension import H, check_reserved, empty_extension, extension_fields

RESERVED_HEADER_FIELDS = frozenset({"alg"})


class Header(BaseModel, Generic[H]):
    """
    Header segment of a token.

    ``algorithm`` travels as ``alg``; the fields of ``extension`` are merged
    into the same JSON object. Parametrize with the extension type to get it
    back on decode, e.g. ``Header[KeyId]``. An unparametrized ``Header``
    decodes extra fields into a plain dict.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    algorithm: Algorithm = Field(default=Algorithm.HS256, alias="alg")
    extension: H | None = None

    @model_validator(mode="after")
    def _reject_reserved_fields(self) -> "Header[H]":
        check_reserved(extension_fields(self.extension), RESERVED_HEADER_FIELDS)
        return self

    def to_json_object(self) -> dict[str, Any]:
        fields: dict[str, Any] = {"alg": self.algorithm.value}
        fields.update(extension_fields(self.extension))
        return fields

    @classmethod
    def from_json_object(cls, fields: dict[str, Any]) -> "Header[H]":
        remaining = dict(fields)
        if "alg" not in remaining:
            raise MalformedSegment("header has no 'alg' field")
        algorithm = remaining.pop("alg")
        return cls.model_validate({"alg": algorithm, "extension": remaining or empty_extension(cls)})
