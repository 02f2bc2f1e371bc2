"""Issue and decode tokens with the configured algorithm, keys, issuer and lifetime."""
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from compactjwt.config import settings
from compactjwt.errors import (
    CryptographicBackendError,
    KeyTypeMismatch,
    MalformedSegment,
    MalformedToken,
    TokenExpired,
    TokenNotYetValid,
    TokenRejected,
)
from compactjwt.models.algorithm import Algorithm, KeyFamily
from compactjwt.models.header import Header
from compactjwt.models.payload import Payload
from compactjwt.protocol.token import Token
from compactjwt.services.keys import load_pem

logger = logging.getLogger(__name__)


class Verdict(str, Enum):
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"


@dataclass
class VerificationResult:
    verdict: Verdict
    reason: str = ""
    payload: Payload | None = None

    @classmethod
    def accept(cls, payload: Payload) -> "VerificationResult":
        return cls(verdict=Verdict.ACCEPT, payload=payload)

    @classmethod
    def reject(cls, reason: str) -> "VerificationResult":
        return cls(verdict=Verdict.REJECT, reason=reason)


def create_token(
    subject: str, claims: dict[str, Any] | None = None, *, key: Any = None, now: float | None = None
) -> str:
    """Issue a token for ``subject`` carrying ``claims`` next to the registered ones."""
    issued_at = int(time.time() if now is None else now)
    payload = Payload(
        issuer=settings.jwt_issuer or None,
        subject=subject,
        issued_at=issued_at,
        expiration=issued_at + settings.jwt_lifetime_s,
        extension=claims or None,
    )
    token = Token.new(Header(algorithm=settings.jwt_algorithm), payload)
    raw = token.sign(_signing_key() if key is None else key)
    logger.debug("Issued %s token sub=%s exp=%s", settings.jwt_algorithm.value, subject, payload.expiration)
    return raw


def decode_token(raw: str, *, key: Any = None, now: float | None = None) -> Payload:
    """
    Verify ``raw`` and return its payload.
    Raises TokenRejected (or TokenExpired / TokenNotYetValid) when the token
    is malformed, uses an algorithm outside JWT_ALLOWED_ALGORITHMS, carries a
    bad signature, cannot be checked with the available key, or its exp /
    nbf / iss claims do not hold.
    """
    try:
        token = Token.parse(raw)
    except (MalformedToken, MalformedSegment) as exc:
        logger.debug("Rejected token: %s", exc)
        raise TokenRejected("malformed_token") from exc

    algorithm = token.header.algorithm
    if algorithm not in settings.jwt_allowed_algorithms:
        logger.debug("Rejected token: algorithm %s not allowed", algorithm.value)
        raise TokenRejected("algorithm_not_allowed")

    try:
        if key is None:
            key = _verification_key(algorithm)
        verified = token.verify(key, algorithms=settings.jwt_allowed_algorithms)
    except OSError as exc:
        logger.warning("No %s verification key available: %s", algorithm.value, exc)
        raise TokenRejected("key_unavailable") from exc
    except KeyTypeMismatch as exc:
        logger.debug("Rejected token: %s", exc)
        raise TokenRejected("key_mismatch") from exc
    except CryptographicBackendError as exc:
        logger.warning("Rejected token: %s", exc)
        raise TokenRejected("backend_error") from exc
    if not verified:
        logger.debug("Rejected token: invalid signature")
        raise TokenRejected("invalid_signature")

    _check_claims(token.payload, time.time() if now is None else now)
    return token.payload


def verify_token(raw: str, *, key: Any = None, now: float | None = None) -> VerificationResult:
    """Same checks as decode_token, reported as a verdict instead of an exception."""
    try:
        payload = decode_token(raw, key=key, now=now)
    except TokenRejected as exc:
        return VerificationResult.reject(exc.reason)
    return VerificationResult.accept(payload)


def _check_claims(payload: Payload, now: float) -> None:
    leeway = settings.jwt_leeway_s
    if payload.expiration is not None and now >= payload.expiration + leeway:
        raise TokenExpired()
    if payload.not_before is not None and now + leeway < payload.not_before:
        raise TokenNotYetValid()
    if settings.jwt_issuer and payload.issuer != settings.jwt_issuer:
        raise TokenRejected("invalid_issuer")


def _signing_key() -> Any:
    if settings.jwt_algorithm.family is KeyFamily.RSA:
        return load_pem(settings.jwt_private_key_path)
    return settings.jwt_secret


def _verification_key(algorithm: Algorithm) -> Any:
    if algorithm.family is KeyFamily.RSA:
        return load_pem(settings.jwt_public_key_path or settings.jwt_private_key_path)
    return settings.jwt_secret
