"""Pydantic settings loaded from the environment and .env."""
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from compactjwt.models.algorithm import Algorithm


class Settings(BaseSettings):
    jwt_secret: str = Field("change-me-to-a-random-32-char-secret", description="HMAC secret for HS* algorithms")
    jwt_algorithm: Algorithm = Field(Algorithm.HS256, description="Algorithm used to issue tokens")
    # JSON list in the environment, e.g. JWT_ALLOWED_ALGORITHMS='["HS256","RS256"]'
    jwt_allowed_algorithms: list[Algorithm] = Field(default_factory=list)
    jwt_private_key_path: str = Field("", description="PEM private key for RS* issuing")
    jwt_public_key_path: str = Field("", description="PEM public key or certificate for RS* decoding")
    jwt_issuer: str = Field("", description="iss stamped on issued tokens and required on decoded ones")
    jwt_lifetime_s: int = Field(3600)
    jwt_leeway_s: int = Field(0)

    @model_validator(mode="after")
    def pin_issuing_algorithm(self) -> "Settings":
        if not self.jwt_allowed_algorithms:
            self.jwt_allowed_algorithms = [self.jwt_algorithm]
        return self

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
