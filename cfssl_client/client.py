"""CFSSL API client.

One method per CFSSL endpoint, plus generic ``get``/``post`` for routes
without a dedicated method. Every method returns a CallResult; expected
failures (rejected input, transport errors, service errors, unreadable
replies) never raise.

Usage::

    from cfssl_client.client import create_client

    with create_client() as cfssl:
        result = cfssl.sign(csr_pem, hosts=["example.com"], bundle=True)
        if result.ok:
            print(result.result["certificate"])
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cfssl_client.audit.logger import (
    clear_correlation_id,
    configure_audit_logger,
    get_correlation_id,
    log_call_failed,
    log_call_succeeded,
    log_request_rejected,
    log_request_sent,
    log_revocation,
    log_transport_error,
    set_correlation_id,
)
from cfssl_client.config import load_config_from_env
from cfssl_client.exceptions import TransportError
from cfssl_client.request.builder import (
    authsign_request,
    bundle_request,
    certinfo_request,
    crl_params,
    info_request,
    init_ca_request,
    newcert_request,
    newkey_request,
    normalize_aki,
    revoke_request,
    scan_params,
    sign_request,
)
from cfssl_client.request.options import bundle_target, certinfo_target, merge_options
from cfssl_client.response.processor import CallResult, ErrorKind, process_response
from cfssl_client.transport.http import HttpxTransport

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from cfssl_client.config import Settings, TransportConfig
    from cfssl_client.request.options import (
        AuthSignOptions,
        BundleTarget,
        CertInfoTarget,
        InfoOptions,
        InitCAOptions,
        NewCertOptions,
        NewKeyOptions,
        ScanOptions,
        SignOptions,
    )
    from cfssl_client.response.processor import CallError
    from cfssl_client.transport.http import Transport


def _describe(error: CallError | None) -> str:
    if isinstance(error, ErrorKind):
        return error.value
    return str(error)


class CFSSLClient:
    """Client for one CFSSL server."""

    def __init__(self, transport: Transport) -> None:
        """Initialize with the transport used to reach the server.

        Args:
            transport: Anything implementing the Transport protocol.
        """
        self._transport = transport

    @classmethod
    def from_config(cls, config: TransportConfig) -> CFSSLClient:
        """Create a client talking HTTP as described by ``config``."""
        return cls(HttpxTransport.from_config(config))

    def close(self) -> None:
        """Release the transport's resources, if it holds any."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> CFSSLClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # --- generic calls ---

    def get(self, route: str, params: Mapping[str, Any] | None = None) -> CallResult:
        """Perform a GET against any CFSSL route.

        Args:
            route: Route name appended to the API prefix, without a leading slash.
            params: Query parameters.

        Returns:
            CallResult with the envelope's ``result`` or the error.
        """
        return self._call("GET", route, dict(params or {}))

    def post(self, route: str, body: Mapping[str, Any]) -> CallResult:
        """Perform a POST against any CFSSL route.

        Args:
            route: Route name appended to the API prefix, without a leading slash.
            body: Mapping serialized to JSON as the request body.

        Returns:
            CallResult with the envelope's ``result`` or the error.
        """
        return self._call("POST", route, dict(body))

    # --- signing ---

    def sign(self, csr: str, options: SignOptions | None = None, **opts: Any) -> CallResult:
        """Request to sign a CSR.

        Args:
            csr: The CSR as a PEM encoded string.
            options: Typed sign options.
            **opts: ``hosts``, ``subject``, ``serial_sequence``, ``label``,
                ``profile``, ``bundle``. Other names are ignored.
        """
        return self.post("sign", sign_request(csr, merge_options(options, opts)))

    def authsign(
        self,
        token: str,
        csr: str,
        options: AuthSignOptions | None = None,
        **opts: Any,
    ) -> CallResult:
        """Request to sign a CSR with authentication.

        Args:
            token: The authentication token.
            csr: The CSR as a PEM encoded string.
            options: Typed authsign options.
            **opts: ``timestamp``, ``remote_address``, ``bundle`` and every
                option accepted by :meth:`sign`.
        """
        return self.post("authsign", authsign_request(token, csr, merge_options(options, opts)))

    # --- key generation ---

    def newkey(
        self,
        hosts: list[str],
        dname: Any,
        options: NewKeyOptions | None = None,
        **opts: Any,
    ) -> CallResult:
        """Request a new key/CSR pair.

        Args:
            hosts: Subject alternative names for the certificate.
            dname: DName for the certificate.
            options: Typed newkey options.
            **opts: ``CN``, ``key``.
        """
        return self.post("newkey", newkey_request(hosts, dname, merge_options(options, opts)))

    def newcert(
        self,
        hosts: list[str],
        dname: Any,
        options: NewCertOptions | None = None,
        **opts: Any,
    ) -> CallResult:
        """Request a new key/signed certificate pair.

        Args:
            hosts: Subject alternative names for the certificate.
            dname: DName for the certificate.
            options: Typed newcert options.
            **opts: ``label``, ``profile``, ``bundle`` and the :meth:`newkey` options.
        """
        return self.post("newcert", newcert_request(hosts, dname, merge_options(options, opts)))

    def init_ca(
        self,
        hosts: list[str],
        dname: Any,
        options: InitCAOptions | None = None,
        **opts: Any,
    ) -> CallResult:
        """Request a new CA key/certificate pair.

        Args:
            hosts: Subject alternative names for the CA certificate.
            dname: DName for the CA certificate.
            options: Typed init_ca options.
            **opts: ``CN``, ``key``, ``ca``.
        """
        return self.post("init_ca", init_ca_request(hosts, dname, merge_options(options, opts)))

    # --- inspection ---

    def bundle(self, target: BundleTarget | None = None, **opts: Any) -> CallResult:
        """Request a certificate bundle.

        Either pass a BundleByCertificate / BundleByDomain target, or keyword
        options containing ``certificate`` or ``domain``. With neither, the
        call fails with NO_CERTIFICATE_OR_DOMAIN and nothing is sent.
        """
        resolved = self._resolve_target("bundle", target, opts, bundle_target)
        if resolved is None:
            return self._reject("bundle")
        return self.post("bundle", bundle_request(resolved))

    def certinfo(self, target: CertInfoTarget | None = None, **opts: Any) -> CallResult:
        """Request information about a certificate.

        Same target rules as :meth:`bundle`, without further options.
        """
        resolved = self._resolve_target("certinfo", target, opts, certinfo_target)
        if resolved is None:
            return self._reject("certinfo")
        return self.post("certinfo", certinfo_request(resolved))

    def info(self, label: str, options: InfoOptions | None = None, **opts: Any) -> CallResult:
        """Get signer information.

        Args:
            label: The signer to describe.
            options: Typed info options.
            **opts: ``profile``.
        """
        return self.post("info", info_request(label, merge_options(options, opts)))

    # --- revocation ---

    def revoke(self, serial: str, aki: str, reason: str) -> CallResult:
        """Request to revoke a certificate.

        Args:
            serial: Serial of the certificate to revoke.
            aki: Authority Key Identifier, with or without colons, any case.
            reason: RFC 5280 ReasonFlags name, e.g. ``keyCompromise``.

        Returns:
            Bare successful CallResult (no payload), or the failure.
        """
        log_revocation(serial=serial, authority_key_id=normalize_aki(aki), reason=reason)
        result = self.post("revoke", revoke_request(serial, aki, reason))
        if result.ok:
            return CallResult.success()
        return result

    def crl(self, expiry: str | None = None) -> CallResult:
        """Generate a CRL from the CA database.

        Args:
            expiry: Optional lifetime of the CRL, e.g. ``"24h"``.
        """
        return self.get("crl", crl_params(expiry))

    # --- scanning ---

    def scan(self, host: str, options: ScanOptions | None = None, **opts: Any) -> CallResult:
        """Scan a host.

        Args:
            host: Hostname, optionally with port.
            options: Typed scan options.
            **opts: ``ip``, ``timeout``, ``family``, ``scanner``.
        """
        return self.get("scan", scan_params(host, merge_options(options, opts)))

    def scaninfo(self) -> CallResult:
        """Get information on the available scan families."""
        return self.get("scaninfo")

    # --- internals ---

    @staticmethod
    def _resolve_target(
        operation: str,
        target: Any,
        opts: Mapping[str, Any],
        pick: Callable[[Mapping[str, Any]], Any],
    ) -> Any:
        if target is not None and opts:
            msg = f"{operation}() takes either a target or keyword options, not both"
            raise TypeError(msg)
        return target if target is not None else pick(opts)

    @staticmethod
    def _reject(operation: str) -> CallResult:
        log_request_rejected(operation=operation, reason=ErrorKind.NO_CERTIFICATE_OR_DOMAIN.value)
        return CallResult.failure(ErrorKind.NO_CERTIFICATE_OR_DOMAIN)

    def _call(self, method: str, route: str, payload: dict[str, Any]) -> CallResult:
        """Send one request and classify the reply."""
        owns_correlation_id = not get_correlation_id()
        if owns_correlation_id:
            set_correlation_id()
        try:
            log_request_sent(method=method, route=route, fields=payload.keys())
            try:
                if method == "GET":
                    raw = self._transport.get(route, payload)
                else:
                    raw = self._transport.post(route, payload)
            except TransportError as e:
                log_transport_error(route=route, error=e)
                return CallResult.failure(e)

            result = process_response(raw)
            if result.ok:
                log_call_succeeded(route=route)
            else:
                log_call_failed(route=route, reason=_describe(result.error))
            return result
        finally:
            if owns_correlation_id:
                clear_correlation_id()


def create_client(settings: Settings | None = None) -> CFSSLClient:
    """Create a configured client.

    Args:
        settings: Optional settings instance. If not provided,
            loads from environment or defaults.

    Returns:
        Client with audit logging configured.
    """
    if settings is None:
        settings = load_config_from_env()

    configure_audit_logger(settings.audit)

    return CFSSLClient.from_config(settings.transport)
