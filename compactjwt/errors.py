"""Exception hierarchy for token encoding, signing and verification."""


class TokenError(Exception):
    """Base class for every error raised by compactjwt."""


class MalformedToken(TokenError):
    """The compact string does not have exactly three non-empty segments."""


class MalformedSegment(TokenError):
    """A segment is not valid base64url, not a JSON object, or does not fit the target type."""


class KeyTypeMismatch(TokenError):
    """The key's shape does not belong to the algorithm's key family."""


class CryptographicBackendError(TokenError):
    """The underlying primitive rejected the key or the operation."""


class InvalidState(TokenError):
    """The operation is not defined for the token's current state."""


class AlgorithmNotAllowed(TokenError):
    """The token header declares an algorithm the caller did not pin."""

    def __init__(self, algorithm: str, allowed: list[str]):
        self.algorithm = algorithm
        self.allowed = allowed
        super().__init__(f"algorithm {algorithm} is not one of {', '.join(allowed) or '(none)'}")


class ReservedFieldCollision(TokenError):
    """An extension serializes a field that belongs to the fixed header or claim set."""

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f"extension fields collide with reserved names: {', '.join(fields)}")


class InvalidExtension(TokenError):
    """An extension value does not serialize to a JSON object."""


class TokenRejected(TokenError):
    """Raised by the issuer service when a token fails signature or claim checks."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class TokenExpired(TokenRejected):
    def __init__(self):
        super().__init__("expired")


class TokenNotYetValid(TokenRejected):
    def __init__(self):
        super().__init__("not_yet_valid")
