"""cfssl-client - Client library for the CFSSL certificate authority API.

Shapes requests for key generation, signing, bundling, inspection,
revocation and TLS scanning, and interprets the service's JSON envelope.
"""

__version__ = "0.1.0"
