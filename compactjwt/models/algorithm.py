"""Algorithm and key-family enums."""
from enum import Enum


class KeyFamily(str, Enum):
    HMAC = "HMAC"
    RSA = "RSA"


class Algorithm(str, Enum):
    """Supported signature algorithms, each a fixed key family and digest width."""

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"

    @property
    def family(self) -> KeyFamily:
        return _REGISTRY[self][0]

    @property
    def digest_bits(self) -> int:
        return _REGISTRY[self][1]


_REGISTRY: dict[Algorithm, tuple[KeyFamily, int]] = {
    Algorithm.HS256: (KeyFamily.HMAC, 256),
    Algorithm.HS384: (KeyFamily.HMAC, 384),
    Algorithm.HS512: (KeyFamily.HMAC, 512),
    Algorithm.RS256: (KeyFamily.RSA, 256),
    Algorithm.RS384: (KeyFamily.RSA, 384),
    Algorithm.RS512: (KeyFamily.RSA, 512),
}

if set(_REGISTRY) != set(Algorithm):
    raise RuntimeError(f"algorithms without a registry entry: {sorted(set(Algorithm) - set(_REGISTRY))}")
