"""Claim set: registered claims plus caller-defined claims."""
from typing import Any, Generic

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, model_validator

from compactjwt.models.extension import C, check_reserved, empty_extension, extension_fields

# Wire names in serialization order.
REGISTERED_CLAIMS = ("iss", "sub", "aud", "exp", "nbf", "iat", "jti")

NumericDate = StrictInt | StrictFloat


class Payload(BaseModel, Generic[C]):
    """
    Payload segment of a token.

    Every registered claim is optional and omitted from the JSON when unset.
    Time claims are seconds since the epoch. Nothing here checks whether the
    claims are current; see ``compactjwt.services.issuer`` for that.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    issuer: StrictStr | None = Field(default=None, alias="iss")
    subject: StrictStr | None = Field(default=None, alias="sub")
    audience: StrictStr | None = Field(default=None, alias="aud")
    expiration: NumericDate | None = Field(default=None, alias="exp")
    not_before: NumericDate | None = Field(default=None, alias="nbf")
    issued_at: NumericDate | None = Field(default=None, alias="iat")
    jwt_id: StrictStr | None = Field(default=None, alias="jti")
    extension: C | None = None

    @model_validator(mode="after")
    def _reject_reserved_fields(self) -> "Payload[C]":
        check_reserved(extension_fields(self.extension), frozenset(REGISTERED_CLAIMS))
        return self

    def to_json_object(self) -> dict[str, Any]:
        fields = self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"extension"})
        fields.update(extension_fields(self.extension))
        return fields

    @classmethod
    def from_json_object(cls, fields: dict[str, Any]) -> "Payload[C]":
        remaining = dict(fields)
        registered = {name: remaining.pop(name) for name in REGISTERED_CLAIMS if name in remaining}
        return cls.model_validate({**registered, "extension": remaining or empty_extension(cls)})
