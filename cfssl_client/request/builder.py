"""Request bodies for the CFSSL API.

Every builder is a pure function returning the mapping that is sent as
the JSON body (or, for reads, as query parameters). A body holds the
operation's required fields plus whichever caller options the operation
accepts; anything else is dropped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cfssl_client.request.options import (
    AUTHSIGN_OPTIONS,
    INFO_OPTIONS,
    INIT_CA_OPTIONS,
    NEWCERT_OPTIONS,
    NEWKEY_OPTIONS,
    SCAN_OPTIONS,
    SIGN_OPTIONS,
    filter_options,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cfssl_client.request.options import BundleTarget, CertInfoTarget


def normalize_aki(aki: str) -> str:
    """Lower-case an Authority Key Identifier and strip colon separators.

    ``"AA:BB:CC"`` and ``"aabbcc"`` both normalize to ``"aabbcc"``.
    """
    return aki.lower().replace(":", "")


def sign_request(csr: str, opts: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Body for ``sign``, also used as the nested request of ``authsign``."""
    return {"certificate_request": csr, **filter_options(opts, SIGN_OPTIONS)}


def authsign_request(token: str, csr: str, opts: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Body for ``authsign``.

    Sign options go into the nested ``request`` object; ``timestamp``,
    ``remote_address`` and ``bundle`` go into the outer object. ``bundle``
    is accepted by both and therefore appears in both.
    """
    return {
        "token": token,
        "request": sign_request(csr, opts),
        **filter_options(opts, AUTHSIGN_OPTIONS),
    }


def newkey_request(hosts: list[str], dname: Any, opts: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Body for ``newkey``, also used as the nested request of ``newcert``."""
    return {"hosts": hosts, "names": dname, **filter_options(opts, NEWKEY_OPTIONS)}


def newcert_request(hosts: list[str], dname: Any, opts: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Body for ``newcert``."""
    return {
        "request": newkey_request(hosts, dname, opts),
        **filter_options(opts, NEWCERT_OPTIONS),
    }


def init_ca_request(hosts: list[str], dname: Any, opts: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Body for ``init_ca``."""
    return {"hosts": hosts, "names": dname, **filter_options(opts, INIT_CA_OPTIONS)}


def bundle_request(target: BundleTarget) -> dict[str, Any]:
    """Body for ``bundle``."""
    return target.as_options()


def certinfo_request(target: CertInfoTarget) -> dict[str, Any]:
    """Body for ``certinfo``."""
    return target.as_options()


def scan_params(host: str, opts: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Query parameters for ``scan``."""
    return {"host": host, **filter_options(opts, SCAN_OPTIONS)}


def info_request(label: str, opts: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Body for ``info``."""
    return {"label": label, **filter_options(opts, INFO_OPTIONS)}


def revoke_request(serial: str, aki: str, reason: str) -> dict[str, Any]:
    """Body for ``revoke``."""
    return {"serial": serial, "authority_key_id": normalize_aki(aki), "reason": reason}


def crl_params(expiry: str | None = None) -> dict[str, Any]:
    """Query parameters for ``crl``."""
    if expiry:
        return {"expiry": expiry}
    return {}
