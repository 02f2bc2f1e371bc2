"""Token: encode -> sign -> compact string, and compact string -> decode -> verify."""
import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any, Generic

from pydantic import BaseModel, PrivateAttr

from compactjwt.errors import AlgorithmNotAllowed, InvalidState, MalformedToken
from compactjwt.models.algorithm import Algorithm
from compactjwt.models.extension import C, H
from compactjwt.models.header import Header
from compactjwt.models.payload import Payload
from compactjwt.services import codec, signer

logger = logging.getLogger(__name__)


class TokenState(str, Enum):
    UNSIGNED = "UNSIGNED"
    SIGNED = "SIGNED"
    PARSED = "PARSED"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class Token(BaseModel, Generic[H, C]):
    """
    A header and a claim set, plus the segments a parsed token arrived with.

    Two entry points: ``Token.new`` for a token you are about to sign, and
    ``Token[H, C].parse`` for one you received. Only parsed tokens can be
    verified, and verification always runs over the received segment text,
    never over a re-serialization of ``header`` and ``payload``.
    """

    header: Header[H]
    payload: Payload[C]

    _raw_segments: tuple[str, str, str] | None = PrivateAttr(default=None)
    _signature: bytes | None = PrivateAttr(default=None)
    _state: TokenState = PrivateAttr(default=TokenState.UNSIGNED)

    @classmethod
    def new(cls, header: Header[H] | None = None, payload: Payload[C] | None = None) -> "Token[H, C]":
        if header is None:
            header = cls._header_type()()
        if payload is None:
            payload = cls._payload_type()()
        return cls(header=header, payload=payload)

    @classmethod
    def parse(cls, raw: str) -> "Token[H, C]":
        if isinstance(raw, (bytes, bytearray)):
            try:
                raw = raw.decode("ascii")
            except UnicodeDecodeError as exc:
                raise MalformedToken("token is not ASCII") from exc
        segments = raw.split(".")
        if len(segments) != 3 or not all(segments):
            raise MalformedToken(f"expected 3 non-empty segments, got {len(segments)} segment(s)")
        encoded_header, encoded_payload, encoded_signature = segments

        token = cls(
            header=codec.decode_segment(encoded_header, cls._header_type()),
            payload=codec.decode_segment(encoded_payload, cls._payload_type()),
        )
        token._signature = codec.b64url_decode(encoded_signature)
        token._raw_segments = (encoded_header, encoded_payload, encoded_signature)
        token._state = TokenState.PARSED
        return token

    @property
    def state(self) -> TokenState:
        return self._state

    @property
    def raw_segments(self) -> tuple[str, str, str] | None:
        return self._raw_segments

    def sign(self, key: Any) -> str:
        """Sign with the header's algorithm and return the compact string."""
        if self._raw_segments is not None:
            raise InvalidState("a parsed token cannot be re-signed; build a new one with Token.new")
        signing_input = f"{codec.encode_segment(self.header)}.{codec.encode_segment(self.payload)}"
        signature = signer.sign(self.header.algorithm, key, signing_input.encode("ascii"))
        self._state = TokenState.SIGNED
        return f"{signing_input}.{codec.b64url_encode(signature)}"

    def verify(self, key: Any, algorithms: Iterable[Algorithm | str] | Algorithm | str | None = None) -> bool:
        """
        Check the signature of a parsed token.

        ``algorithms`` pins the algorithms the caller is prepared to accept;
        a header declaring anything else raises AlgorithmNotAllowed before any
        key is touched. Claims such as ``exp`` are not checked here.
        """
        if self._raw_segments is None or self._signature is None:
            raise InvalidState("only a parsed token can be verified")
        algorithm = self.header.algorithm
        if algorithms is not None:
            if isinstance(algorithms, (str, Algorithm)):
                algorithms = [algorithms]
            allowed = [Algorithm(name).value for name in algorithms]
            if algorithm.value not in allowed:
                logger.debug("Rejecting %s token: allowed algorithms are %s", algorithm.value, allowed)
                raise AlgorithmNotAllowed(algorithm.value, allowed)

        encoded_header, encoded_payload, _ = self._raw_segments
        signing_input = f"{encoded_header}.{encoded_payload}".encode("ascii")
        valid = signer.verify(algorithm, key, signing_input, self._signature)
        self._state = TokenState.VERIFIED if valid else TokenState.REJECTED
        if not valid:
            logger.debug("Signature mismatch on %s token", algorithm.value)
        return valid

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.header == other.header and self.payload == other.payload

    @classmethod
    def _header_type(cls) -> type[Header]:
        return cls.model_fields["header"].annotation

    @classmethod
    def _payload_type(cls) -> type[Payload]:
        return cls.model_fields["payload"].annotation
