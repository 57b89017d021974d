"""Distinguished name and subject records sent inside CFSSL requests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DName(BaseModel):
    """Distinguished name components of a certificate.

    Every component is optional; unset components are left out of the
    request sent to CFSSL.
    """

    model_config = ConfigDict(frozen=True)

    C: str | None = None
    L: str | None = None
    O: str | None = None  # noqa: E741
    OU: str | None = None
    ST: str | None = None


class Subject(BaseModel):
    """Subject override for a sign request."""

    model_config = ConfigDict(frozen=True)

    CN: str | None = None
    names: list[DName] = []
