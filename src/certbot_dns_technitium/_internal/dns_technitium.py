"""DNS Authenticator for Technitium DNS Server."""
import logging
from collections.abc import Callable
from typing import Any
from typing import Optional

from certbot import achallenges
from certbot import errors
from certbot.plugins import dns_common
from certbot.plugins.dns_common import CredentialsConfiguration

from certbot_dns_technitium._internal.client import HTTPTransport
from certbot_dns_technitium._internal.client import TechnitiumClient
from certbot_dns_technitium._internal.config import DEFAULT_TTL
from certbot_dns_technitium._internal.connector import Connector
from certbot_dns_technitium._internal.connector import TechnitiumConnector

logger = logging.getLogger(__name__)

TOKEN_URL = 'https://github.com/TechnitiumSoftware/DnsServer/blob/master/APIDOCS.md'


class Authenticator(dns_common.DNSAuthenticator):
    """DNS Authenticator for Technitium DNS Server

    This Authenticator uses the Technitium DNS Server HTTP API to fulfill a dns-01 challenge.
    """

    description = ('Obtain certificates using a DNS TXT record (if you are using Technitium DNS '
                   'Server for DNS).')
    ttl = DEFAULT_TTL

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.credentials: Optional[CredentialsConfiguration] = None
        self._transport: Optional[HTTPTransport] = None

    @classmethod
    def add_parser_arguments(cls, add: Callable[..., None],
                             default_propagation_seconds: int = 60) -> None:
        super().add_parser_arguments(add, default_propagation_seconds)
        add('credentials', help='Technitium DNS Server credentials INI file.')

    def more_info(self) -> str:
        return 'This plugin configures a DNS TXT record to respond to a dns-01 challenge using ' + \
               'the Technitium DNS Server HTTP API.'

    def _validate_credentials(self, credentials: CredentialsConfiguration) -> None:
        server_url = credentials.conf('server-url')
        if server_url and not server_url.startswith(('http://', 'https://')):
            raise errors.PluginError('{0}: dns_technitium_server_url must be an http or https '
                                     'URL, got {1}'.format(credentials.confobj.filename,
                                                           server_url))

    def _setup_credentials(self) -> None:
        self.credentials = self._configure_credentials(
            'credentials',
            'Technitium DNS Server credentials INI file',
            {
                'server-url': 'URL of the Technitium DNS Server web service',
                'token': 'API token for the Technitium DNS Server (see {0})'.format(TOKEN_URL),
            },
            self._validate_credentials
        )

    def cleanup(self, achalls: list[achallenges.AnnotatedChallenge]) -> None:  # pylint: disable=missing-function-docstring
        try:
            super().cleanup(achalls)
        finally:
            if self._transport is not None:
                self._transport.close()
                self._transport = None

    def _perform(self, domain: str, validation_name: str, validation: str) -> None:
        connector = self._get_technitium_connector()
        zone = self._get_zone(connector, validation_name)
        connector.create_txt_record(zone, validation_name, validation, self.ttl)

    def _cleanup(self, domain: str, validation_name: str, validation: str) -> None:
        connector = self._get_technitium_connector()
        zone = self._get_zone(connector, validation_name)
        connector.delete_txt_record(zone, validation_name, validation)

    def _get_zone(self, connector: Connector, validation_name: str) -> str:
        if not self.credentials:  # pragma: no cover
            raise errors.Error("Plugin has not been prepared.")
        zone = self.credentials.conf('zone')
        if zone:
            return zone
        return connector.find_authoritative_zone(validation_name)

    def _get_technitium_connector(self) -> Connector:
        if not self.credentials:  # pragma: no cover
            raise errors.Error("Plugin has not been prepared.")
        if self._transport is None:
            self._transport = HTTPTransport()
        return TechnitiumConnector(TechnitiumClient(self.credentials.conf('server-url'),
                                                    self.credentials.conf('token'),
                                                    self._transport))
