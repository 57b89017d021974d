"""Optional parameters accepted by each CFSSL operation.

Each operation accepts a fixed set of option names. Options can be given
as keyword arguments, which are filtered against the operation's accepted
names, or as a typed options model whose fields are exactly those names.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict

from cfssl_client.values.keys import CAConfig, KeyConfig
from cfssl_client.values.names import Subject

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping

SIGN_OPTIONS = frozenset({"hosts", "subject", "serial_sequence", "label", "profile", "bundle"})
AUTHSIGN_OPTIONS = frozenset({"timestamp", "remote_address", "bundle"})
NEWKEY_OPTIONS = frozenset({"CN", "key"})
NEWCERT_OPTIONS = frozenset({"label", "profile", "bundle"})
INIT_CA_OPTIONS = frozenset({"CN", "key", "ca"})
BUNDLE_CERTIFICATE_OPTIONS = frozenset({"domain", "private_key", "flavor", "ip"})
BUNDLE_DOMAIN_OPTIONS = frozenset({"ip"})
SCAN_OPTIONS = frozenset({"ip", "timeout", "family", "scanner"})
INFO_OPTIONS = frozenset({"profile"})

BundleFlavor = Literal["ubiquitous", "optimal", "force"]


def filter_options(options: Mapping[str, Any] | None, accepted: Collection[str]) -> dict[str, Any]:
    """Keep only the options whose name is in ``accepted``.

    Values are kept as given. Unknown names are dropped without error.
    """
    if not options:
        return {}
    return {name: value for name, value in options.items() if name in accepted}


class OperationOptions(BaseModel):
    """Base for typed option sets.

    Only fields the caller actually set are sent, so an explicit
    ``bundle=False`` reaches the service while an unset field does not.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def accepted(cls) -> frozenset[str]:
        """Names of every option this model can carry."""
        return frozenset(cls.model_fields)

    def as_options(self) -> dict[str, Any]:
        """Return the explicitly set options as a plain mapping."""
        return {name: getattr(self, name) for name in self.model_fields_set}


def merge_options(
    options: OperationOptions | Mapping[str, Any] | None,
    extra: Mapping[str, Any],
) -> dict[str, Any]:
    """Combine a typed option set with keyword options; keywords win."""
    if options is None:
        merged: dict[str, Any] = {}
    elif isinstance(options, OperationOptions):
        merged = options.as_options()
    else:
        merged = dict(options)
    merged.update(extra)
    return merged


class SignOptions(OperationOptions):
    """Options for sign, and for the nested request of authsign."""

    hosts: list[str] | None = None
    subject: Subject | None = None
    serial_sequence: str | None = None
    label: str | None = None
    profile: str | None = None
    bundle: bool | None = None


class AuthSignOptions(SignOptions):
    """Options for authsign: the sign options plus the outer request fields."""

    timestamp: int | None = None
    remote_address: str | None = None


class NewKeyOptions(OperationOptions):
    """Options for newkey."""

    CN: str | None = None
    key: KeyConfig | None = None


class NewCertOptions(NewKeyOptions):
    """Options for newcert: the newkey options plus signer selection."""

    label: str | None = None
    profile: str | None = None
    bundle: bool | None = None


class InitCAOptions(OperationOptions):
    """Options for init_ca."""

    CN: str | None = None
    key: KeyConfig | None = None
    ca: CAConfig | None = None


class ScanOptions(OperationOptions):
    """Options for scan."""

    ip: str | None = None
    timeout: str | None = None
    family: str | None = None
    scanner: str | None = None


class InfoOptions(OperationOptions):
    """Options for info."""

    profile: str | None = None


# --- bundle / certinfo targets ---


class BundleByCertificate(OperationOptions):
    """Bundle a PEM certificate supplied by the caller."""

    certificate: str
    domain: str | None = None
    private_key: str | None = None
    flavor: BundleFlavor | None = None
    ip: str | None = None


class BundleByDomain(OperationOptions):
    """Bundle the certificate served by a remote host."""

    domain: str
    ip: str | None = None


class CertInfoByCertificate(OperationOptions):
    """Inspect a PEM certificate supplied by the caller."""

    certificate: str


class CertInfoByDomain(OperationOptions):
    """Inspect the certificate served by a remote host."""

    domain: str


BundleTarget = BundleByCertificate | BundleByDomain
CertInfoTarget = CertInfoByCertificate | CertInfoByDomain


def bundle_target(opts: Mapping[str, Any]) -> BundleTarget | None:
    """Pick the bundle variant from keyword options.

    ``certificate`` takes precedence over ``domain``. Returns None when
    neither is present.
    """
    if "certificate" in opts:
        fields = filter_options(opts, BUNDLE_CERTIFICATE_OPTIONS | {"certificate"})
        return BundleByCertificate.model_construct(**fields)
    if "domain" in opts:
        fields = filter_options(opts, BUNDLE_DOMAIN_OPTIONS | {"domain"})
        return BundleByDomain.model_construct(**fields)
    return None


def certinfo_target(opts: Mapping[str, Any]) -> CertInfoTarget | None:
    """Pick the certinfo variant from keyword options.

    ``certificate`` takes precedence over ``domain``. Returns None when
    neither is present.
    """
    if "certificate" in opts:
        return CertInfoByCertificate.model_construct(certificate=opts["certificate"])
    if "domain" in opts:
        return CertInfoByDomain.model_construct(domain=opts["domain"])
    return None
