"""TXT record management."""
import json
import logging
from typing import Any
from typing import NamedTuple
from typing import Optional

from certbot_dns_technitium._internal import errors
from certbot_dns_technitium._internal.client import Deadline
from certbot_dns_technitium._internal.client import TechnitiumClient

logger = logging.getLogger(__name__)

RECORD_ADD_PATH = '/api/zones/records/add'
RECORD_DELETE_PATH = '/api/zones/records/delete'

# The API reports every failure as status "error" with a free-form message,
# so outcomes that are not really failures can only be told apart by text.
# These are matched case-insensitively. Fragile: revisit if the server starts
# returning structured error codes.
RECORD_ABSENT_MESSAGES = (
    'not found',
    'no such record',
    'does not exist',
    "doesn't exist",
)
RECORD_PRESENT_MESSAGES = (
    'already exists',
)


def is_record_absent(message: Optional[str]) -> bool:
    """Whether an error message says the record to delete is already gone."""
    lowered = (message or '').lower()
    return any(phrase in lowered for phrase in RECORD_ABSENT_MESSAGES)


def is_record_present(message: Optional[str]) -> bool:
    """Whether an error message says the record to add already exists."""
    lowered = (message or '').lower()
    return any(phrase in lowered for phrase in RECORD_PRESENT_MESSAGES)


class APIResult(NamedTuple):
    """Outcome of an API call as reported in the response body."""
    status: str
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == 'ok'

    @classmethod
    def from_body(cls, body: bytes) -> 'APIResult':
        """Decode a response body.

        :raises .errors.APIError: if the body is not a JSON object

        """
        try:
            data: Any = json.loads(body)
        except ValueError as e:
            logger.error('Failed to parse API response: %s', e)
            raise errors.APIError('error parsing API response: {0}'.format(e))
        if not isinstance(data, dict):
            raise errors.APIError('error parsing API response: expected a JSON object')
        message = data.get('errorMessage')
        if message is not None and not isinstance(message, str):
            message = str(message)
        return cls(status=str(data.get('status', '')), message=message)


class TXTRecord(NamedTuple):
    """A TXT record to publish, trailing dots already removed."""
    owner_name: str
    zone: str
    value: str
    ttl: Optional[int] = None


class RecordManager:
    """Creates and deletes TXT records through the zone records API."""

    def __init__(self, client: TechnitiumClient) -> None:
        self.client = client

    def create_txt_record(self, zone: str, fqdn: str, value: str, ttl: int,
                          deadline: Optional[Deadline] = None) -> None:
        """
        Add a TXT record using the supplied information.

        The record is left in place if the server reports that it already
        exists, so calling this again for the same value is harmless.

        :param str zone: The zone to add the record to.
        :param str fqdn: The record name (typically beginning with '_acme-challenge.').
        :param str value: The record content (typically the challenge validation).
        :param int ttl: The record TTL (number of seconds that the record may be cached).
        :raises .errors.APIError: if the server does not report success
        :raises .errors.TransportError: on network failure

        """
        if ttl <= 0:
            raise ValueError('TTL must be a positive number of seconds, got {0}'.format(ttl))
        record = TXTRecord(owner_name=fqdn.rstrip('.'), zone=zone.rstrip('.'),
                           value=value, ttl=ttl)
        logger.info('Creating TXT record for %s (zone: %s, ttl: %d)',
                    record.owner_name, record.zone, record.ttl)

        fields = self._record_fields(record)
        fields['ttl'] = str(record.ttl)
        result = APIResult.from_body(self.client.post_form(RECORD_ADD_PATH, fields, deadline))

        if not result.ok:
            if is_record_present(result.message):
                logger.warning('TXT record for %s already exists: %s',
                               record.owner_name, result.message)
                return
            logger.error('Error creating TXT record for %s: %s (status: %s)',
                         record.owner_name, result.message, result.status)
            raise errors.APIError(result.message, result.status)

        logger.info('Successfully created TXT record for %s', record.owner_name)

    def delete_txt_record(self, zone: str, fqdn: str, value: str,
                          deadline: Optional[Deadline] = None) -> None:
        """
        Delete a TXT record using the supplied information.

        Deleting a record that does not exist is not an error.

        :param str zone: The zone holding the record.
        :param str fqdn: The record name (typically beginning with '_acme-challenge.').
        :param str value: The record content, so that only our record is removed.
        :raises .errors.APIError: if the server does not report success
        :raises .errors.TransportError: on network failure

        """
        record = TXTRecord(owner_name=fqdn.rstrip('.'), zone=zone.rstrip('.'),
                           value=value)
        logger.info('Deleting TXT record for %s (zone: %s)', record.owner_name, record.zone)

        fields = self._record_fields(record)
        result = APIResult.from_body(self.client.post_form(RECORD_DELETE_PATH, fields, deadline))

        if not result.ok:
            logger.warning('API returned non-ok status: %s, error: %s',
                           result.status, result.message)
            if is_record_absent(result.message):
                logger.info('TXT record for %s is already gone', record.owner_name)
                return
            raise errors.APIError(result.message, result.status)

        logger.info('Successfully deleted TXT record for %s', record.owner_name)

    @staticmethod
    def _record_fields(record: TXTRecord) -> dict[str, str]:
        return {
            'domain': record.owner_name,
            'zone': record.zone,
            'type': 'TXT',
            'text': record.value,
            'splitText': 'false',
        }
