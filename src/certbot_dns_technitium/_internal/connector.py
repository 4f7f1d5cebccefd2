"""Connection to one Technitium DNS Server with one API token."""
import abc
import logging
from collections.abc import Callable
from typing import Optional

from certbot_dns_technitium._internal.client import Deadline
from certbot_dns_technitium._internal.client import HTTPTransport
from certbot_dns_technitium._internal.client import TechnitiumClient
from certbot_dns_technitium._internal.records import RecordManager
from certbot_dns_technitium._internal.zones import ZoneResolver

logger = logging.getLogger(__name__)


class Connector(metaclass=abc.ABCMeta):
    """Zone discovery and TXT record lifecycle on a DNS server."""

    @abc.abstractmethod
    def find_authoritative_zone(self, fqdn: str,
                                deadline: Optional[Deadline] = None) -> str:  # pragma: no cover
        """
        Find the most specific enabled zone covering ``fqdn``.

        :raises .errors.ZoneNotFoundError: if there is none
        """
        raise NotImplementedError()

    @abc.abstractmethod
    def create_txt_record(self, zone: str, fqdn: str, value: str, ttl: int,
                          deadline: Optional[Deadline] = None) -> None:  # pragma: no cover
        """Create a TXT record holding ``value`` at ``fqdn`` in ``zone``."""
        raise NotImplementedError()

    @abc.abstractmethod
    def delete_txt_record(self, zone: str, fqdn: str, value: str,
                          deadline: Optional[Deadline] = None) -> None:  # pragma: no cover
        """Delete the TXT record holding ``value`` at ``fqdn``; absent records are fine."""
        raise NotImplementedError()


ConnectorFactory = Callable[[str, str], Connector]


class TechnitiumConnector(Connector):
    """Connector talking to the Technitium DNS Server HTTP API."""

    def __init__(self, client: TechnitiumClient) -> None:
        self.client = client
        self.zones = ZoneResolver(client)
        self.records = RecordManager(client)

    def find_authoritative_zone(self, fqdn: str, deadline: Optional[Deadline] = None) -> str:
        return self.zones.find_authoritative_zone(fqdn, deadline)

    def create_txt_record(self, zone: str, fqdn: str, value: str, ttl: int,
                          deadline: Optional[Deadline] = None) -> None:
        self.records.create_txt_record(zone, fqdn, value, ttl, deadline)

    def delete_txt_record(self, zone: str, fqdn: str, value: str,
                          deadline: Optional[Deadline] = None) -> None:
        self.records.delete_txt_record(zone, fqdn, value, deadline)


def technitium_connector_factory(transport: HTTPTransport) -> ConnectorFactory:
    """Build a factory of `TechnitiumConnector` sharing ``transport``."""
    def create(server_url: str, auth_token: str) -> Connector:
        logger.debug('Creating Technitium connector for %s', server_url)
        return TechnitiumConnector(TechnitiumClient(server_url, auth_token, transport))
    return create
