"""Authoritative zone discovery."""
import json
import logging
from typing import Any
from typing import NamedTuple
from typing import Optional

from certbot.plugins import dns_common

from certbot_dns_technitium._internal import errors
from certbot_dns_technitium._internal.client import Deadline
from certbot_dns_technitium._internal.client import TechnitiumClient

logger = logging.getLogger(__name__)

ZONE_LOOKUP_PATH = '/api/zones/records/get'


class Zone(NamedTuple):
    """A zone as reported by the DNS server."""
    name: str
    kind: str
    dnssec_status: str
    disabled: bool


def parse_zone_response(body: bytes) -> Optional[Zone]:
    """Decode a zone lookup response.

    :param bytes body: Raw response body.
    :returns: The zone, or None if the server did not answer ``ok``.
    :rtype: `Zone` or `None`
    :raises ValueError: if the body is not a JSON object of the expected shape

    """
    data: Any = json.loads(body)
    if not isinstance(data, dict):
        raise ValueError('expected a JSON object, got {0}'.format(type(data).__name__))
    if data.get('status') != 'ok':
        return None
    response = data.get('response') or {}
    if not isinstance(response, dict):
        raise ValueError('malformed response object')
    zone = response.get('zone') or {}
    if not isinstance(zone, dict):
        raise ValueError('malformed zone description')
    return Zone(name=zone.get('name', ''),
                kind=zone.get('type', ''),
                dnssec_status=zone.get('dnssecStatus', ''),
                disabled=bool(zone.get('disabled', False)))


class ZoneResolver:
    """Finds the most specific enabled zone on the server covering a domain."""

    def __init__(self, client: TechnitiumClient) -> None:
        self.client = client

    def lookup_zone(self, name: str, deadline: Optional[Deadline] = None) -> Optional[Zone]:
        """Ask the server about a single zone name.

        :param str name: Candidate zone name, without trailing dot.
        :returns: The zone if the server knows it, None otherwise.
        :rtype: `Zone` or `None`
        :raises .errors.TransportError: on network failure
        :raises ValueError: if the response cannot be decoded

        """
        body = self.client.get_json(ZONE_LOOKUP_PATH,
                                    {'domain': name, 'listZone': 'false'}, deadline)
        return parse_zone_response(body)

    def find_authoritative_zone(self, fqdn: str, deadline: Optional[Deadline] = None) -> str:
        """Find the zone that should hold records for ``fqdn``.

        Candidates are tried from the full domain down to its top-level
        label, so the first match is the most specific zone. A failed lookup
        only skips its own candidate.

        :param str fqdn: Domain name, optionally dot-terminated.
        :returns: The name of the most specific enabled zone.
        :rtype: str
        :raises .errors.ZoneNotFoundError: if no candidate is an enabled zone

        """
        domain = fqdn[:-1] if fqdn.endswith('.') else fqdn

        for candidate in dns_common.base_domain_name_guesses(domain):
            logger.debug('Checking if %s is an authoritative zone', candidate)
            try:
                zone = self.lookup_zone(candidate, deadline)
            except (errors.TransportError, ValueError) as e:
                logger.debug('Error querying zone %s: %s', candidate, e)
                continue

            if zone is None:
                logger.debug('Zone %s not known to the server', candidate)
            elif zone.disabled:
                logger.debug('Zone %s is disabled, skipping', candidate)
            else:
                logger.debug('Zone %s found (type: %s, dnssec: %s)',
                             candidate, zone.kind, zone.dnssec_status)
                return candidate

        raise errors.ZoneNotFoundError(fqdn)
