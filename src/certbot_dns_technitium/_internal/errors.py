"""Technitium DNS plugin errors."""
from typing import Optional

from certbot import errors


class TechnitiumError(errors.PluginError):
    """Generic Technitium DNS plugin error."""


class ConfigError(TechnitiumError):
    """Missing, malformed or invalid solver configuration."""


class SecretError(TechnitiumError):
    """Referenced secret or secret key could not be read."""


class TransportError(TechnitiumError):
    """Network error talking to the DNS server (DNS, TCP, TLS, timeout)."""


class APIError(TechnitiumError):
    """The DNS server answered with a status other than ``ok``.

    :ivar str message: Error message reported by the server, if any.
    :ivar str status: Status reported by the server, if any.

    """
    def __init__(self, message: Optional[str], status: Optional[str] = None) -> None:
        self.message = message or ''
        self.status = status
        super().__init__(message)

    def __str__(self) -> str:
        return 'API error: {0}'.format(self.message or self.status or 'unknown error')


class ZoneNotFoundError(TechnitiumError):
    """No enabled zone on the DNS server covers a domain.

    :ivar str fqdn: The domain name the search was started from.

    """
    def __init__(self, fqdn: str) -> None:
        self.fqdn = fqdn
        super().__init__(fqdn)

    def __str__(self) -> str:
        return 'No authoritative zone found for domain {0}'.format(self.fqdn)
