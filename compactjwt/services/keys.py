"""Key material: per-call acquisition, PEM loading and key-family checks."""
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from compactjwt.errors import CryptographicBackendError, KeyTypeMismatch

_BYTES_LIKE = (bytes, bytearray, memoryview)
_ASYMMETRIC_PREFIXES = (b"-----BEGIN ", b"ssh-rsa ", b"ssh-ed25519 ", b"ecdsa-sha2-")


def load_pem(path: str | Path) -> bytes:
    """Read a PEM key or certificate file."""
    return Path(path).read_bytes()


@contextmanager
def acquire(key: Any) -> Iterator[Any]:
    """
    Yield key material for the duration of one sign/verify call.

    A key that is a context manager (a lease handing out the real key) is
    entered here and released when the call returns or raises. Anything else
    is yielded as is.
    """
    if isinstance(key, (str, *_BYTES_LIKE)) or not hasattr(key, "__enter__"):
        yield key
        return
    with key as material:
        yield material


@contextmanager
def hmac_secret(key: Any) -> Iterator[bytearray]:
    """Copy an HMAC secret into a buffer that is zeroed once the caller is done with it."""
    if isinstance(key, str):
        secret = bytearray(key, "utf-8")
    elif isinstance(key, _BYTES_LIKE):
        secret = bytearray(key)
    else:
        raise KeyTypeMismatch(f"HMAC algorithms need a bytes or str secret, got {type(key).__name__}")
    try:
        if secret.startswith(_ASYMMETRIC_PREFIXES, _leading_whitespace(secret)):
            raise KeyTypeMismatch("PEM or SSH key material cannot be used as an HMAC secret")
        yield secret
    finally:
        secret[:] = bytes(len(secret))


def rsa_signing_key(key: Any) -> rsa.RSAPrivateKey:
    if isinstance(key, rsa.RSAPrivateKey):
        return key
    if isinstance(key, rsa.RSAPublicKey):
        raise KeyTypeMismatch("RSA signing needs the private key, got a public key")
    pem = _pem_text(key)
    if b"PRIVATE KEY" not in pem:
        raise KeyTypeMismatch("RSA signing needs a PEM private key")
    try:
        loaded = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise CryptographicBackendError(f"could not load PEM private key: {exc}") from exc
    return _require_rsa(loaded)


def rsa_verifying_key(key: Any) -> rsa.RSAPublicKey:
    """Public half of ``key``; private keys and X.509 certificates are accepted too."""
    if isinstance(key, rsa.RSAPublicKey):
        return key
    if isinstance(key, rsa.RSAPrivateKey):
        return key.public_key()
    pem = _pem_text(key)
    try:
        if b"CERTIFICATE" in pem:
            loaded = x509.load_pem_x509_certificate(pem).public_key()
        elif b"PRIVATE KEY" in pem:
            loaded = serialization.load_pem_private_key(pem, password=None).public_key()
        else:
            loaded = serialization.load_pem_public_key(pem)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise CryptographicBackendError(f"could not load PEM key: {exc}") from exc
    return _require_rsa(loaded)


def _pem_text(key: Any) -> bytes:
    if isinstance(key, str):
        key = key.encode("utf-8")
    if not isinstance(key, _BYTES_LIKE):
        raise KeyTypeMismatch(f"RSA algorithms need an RSA key or PEM text, got {type(key).__name__}")
    pem = bytes(key)
    if not pem.lstrip().startswith(b"-----BEGIN "):
        raise KeyTypeMismatch("RSA algorithms need an RSA key or PEM text, got a raw secret")
    return pem


def _leading_whitespace(buffer: bytearray) -> int:
    index = 0
    while index < len(buffer) and buffer[index] in b" \t\n\r\x0b\x0c":
        index += 1
    return index


def _require_rsa(key: Any) -> Any:
    if not isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        raise KeyTypeMismatch(f"expected an RSA key, got {type(key).__name__}")
    return key
