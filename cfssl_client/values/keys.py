"""Key and CA configuration records sent inside CFSSL requests."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

RSA_MIN_SIZE = 2048
RSA_MAX_SIZE = 8192
ECDSA_SIZES = (256, 384, 521)


class KeyAlgorithm(str, Enum):
    """Key algorithms understood by CFSSL."""

    RSA = "rsa"
    ECDSA = "ecdsa"


class KeyConfig(BaseModel):
    """Key generation parameters.

    Defaults to ECDSA P-256, which is also what CFSSL uses when no key
    configuration is sent.
    """

    model_config = ConfigDict(frozen=True)

    algo: KeyAlgorithm = KeyAlgorithm.ECDSA
    size: int = 256

    @model_validator(mode="after")
    def validate_size(self) -> KeyConfig:
        """Check the size is valid for the chosen algorithm."""
        if self.algo == KeyAlgorithm.RSA and not RSA_MIN_SIZE <= self.size <= RSA_MAX_SIZE:
            msg = f"RSA key size must be between {RSA_MIN_SIZE} and {RSA_MAX_SIZE}, got {self.size}"
            raise ValueError(msg)
        if self.algo == KeyAlgorithm.ECDSA and self.size not in ECDSA_SIZES:
            allowed = ", ".join(str(s) for s in ECDSA_SIZES)
            msg = f"ECDSA key size must be one of {allowed}, got {self.size}"
            raise ValueError(msg)
        return self


class CAConfig(BaseModel):
    """CA certificate constraints for init_ca."""

    model_config = ConfigDict(frozen=True)

    pathlen: Annotated[int, Field(ge=0)] | None = None
    pathlenzero: bool | None = None
    expiry: str | None = None
    backdate: str | None = None
