"""Signature primitives, dispatched on the algorithm's key family."""
import hashlib
import hmac

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from compactjwt.errors import CryptographicBackendError
from compactjwt.models.algorithm import Algorithm, KeyFamily
from compactjwt.services.keys import acquire, hmac_secret, rsa_signing_key, rsa_verifying_key

_HMAC_DIGESTS = {256: hashlib.sha256, 384: hashlib.sha384, 512: hashlib.sha512}
_RSA_DIGESTS = {256: hashes.SHA256, 384: hashes.SHA384, 512: hashes.SHA512}


def sign(algorithm: Algorithm, key, message: bytes) -> bytes:
    """
    Sign ``message`` with ``key`` under ``algorithm``.
    Raises KeyTypeMismatch when the key does not belong to the algorithm's
    family and CryptographicBackendError when the primitive rejects it.
    """
    algorithm = Algorithm(algorithm)
    with acquire(key) as material:
        if algorithm.family is KeyFamily.HMAC:
            with hmac_secret(material) as secret:
                return _hmac_digest(algorithm, secret, message)
        if algorithm.family is KeyFamily.RSA:
            private_key = rsa_signing_key(material)
            try:
                return private_key.sign(message, padding.PKCS1v15(), _RSA_DIGESTS[algorithm.digest_bits]())
            except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
                raise CryptographicBackendError(f"{algorithm.value} signing failed: {exc}") from exc
    raise AssertionError(f"unhandled key family {algorithm.family}")


def verify(algorithm: Algorithm, key, message: bytes, signature: bytes) -> bool:
    """True when ``signature`` matches; a mismatch is False, never an exception."""
    algorithm = Algorithm(algorithm)
    with acquire(key) as material:
        if algorithm.family is KeyFamily.HMAC:
            with hmac_secret(material) as secret:
                expected = _hmac_digest(algorithm, secret, message)
            return hmac.compare_digest(expected, signature)
        if algorithm.family is KeyFamily.RSA:
            public_key = rsa_verifying_key(material)
            try:
                public_key.verify(signature, message, padding.PKCS1v15(), _RSA_DIGESTS[algorithm.digest_bits]())
            except InvalidSignature:
                return False
            except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
                raise CryptographicBackendError(f"{algorithm.value} verification failed: {exc}") from exc
            return True
    raise AssertionError(f"unhandled key family {algorithm.family}")


def _hmac_digest(algorithm: Algorithm, secret: bytearray, message: bytes) -> bytes:
    return hmac.new(secret, message, _HMAC_DIGESTS[algorithm.digest_bits]).digest()
