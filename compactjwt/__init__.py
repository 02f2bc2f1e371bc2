"""Compact JSON Web Tokens: HS256/384/512 and RS256/384/512 signing and verification."""
import logging

from compactjwt.errors import (
    AlgorithmNotAllowed,
    CryptographicBackendError,
    InvalidExtension,
    InvalidState,
    KeyTypeMismatch,
    MalformedSegment,
    MalformedToken,
    ReservedFieldCollision,
    TokenError,
)
from compactjwt.models.algorithm import Algorithm, KeyFamily
from compactjwt.models.header import Header
from compactjwt.models.payload import Payload
from compactjwt.protocol.token import Token, TokenState

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Algorithm",
    "AlgorithmNotAllowed",
    "CryptographicBackendError",
    "Header",
    "InvalidExtension",
    "InvalidState",
    "KeyFamily",
    "KeyTypeMismatch",
    "MalformedSegment",
    "MalformedToken",
    "Payload",
    "ReservedFieldCollision",
    "Token",
    "TokenError",
    "TokenState",
]
