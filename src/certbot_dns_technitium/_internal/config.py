"""Solver configuration."""
import json
import logging
from collections.abc import Mapping
from typing import Any
from typing import NamedTuple
from typing import Optional
from typing import Union
from urllib.parse import urlparse

from certbot_dns_technitium._internal import errors

logger = logging.getLogger(__name__)

DEFAULT_TTL = 60


class SecretKeySelector(NamedTuple):
    """Reference to one key of a named secret."""
    name: str
    key: str


class SolverConfig(NamedTuple):
    """Per-issuer settings decoded from the challenge request.

    :ivar str server_url: Base URL of the DNS server, without trailing slash.
    :ivar SecretKeySelector auth_token_secret_ref: Where the API token lives.
    :ivar str zone: Zone to use instead of discovering one.
    :ivar int ttl: TTL of created records, as configured.

    """
    server_url: str
    auth_token_secret_ref: SecretKeySelector
    zone: Optional[str] = None
    ttl: Optional[int] = None


def effective_ttl(*candidates: Optional[int]) -> int:
    """First positive TTL among ``candidates``, or `DEFAULT_TTL`."""
    for ttl in candidates:
        if ttl is not None and ttl > 0:
            return ttl
    return DEFAULT_TTL


def load_config(raw: Union[bytes, str, Mapping[str, Any], None]) -> SolverConfig:
    """Decode and validate a solver configuration.

    :param raw: The JSON document (or already decoded mapping) attached to
        the challenge request.
    :returns: The validated configuration.
    :rtype: SolverConfig
    :raises .errors.ConfigError: if the configuration is missing or invalid

    """
    if raw is None or raw in (b'', ''):
        raise errors.ConfigError('no config provided')

    if isinstance(raw, (bytes, str)):
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise errors.ConfigError('error decoding solver config: {0}'.format(e))
    else:
        data = raw

    if not isinstance(data, Mapping):
        raise errors.ConfigError('error decoding solver config: expected a JSON object')

    server_url = data.get('serverUrl')
    if not server_url or not isinstance(server_url, str):
        raise errors.ConfigError('serverUrl must be provided')
    parsed = urlparse(server_url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise errors.ConfigError('serverUrl must be an http or https URL, got {0!r}'
                                 .format(server_url))

    ref = data.get('authTokenSecretRef')
    if not isinstance(ref, Mapping) or not ref.get('name') or not ref.get('key'):
        raise errors.ConfigError('authTokenSecretRef must be provided')

    zone = data.get('zone') or None
    if zone is not None and not isinstance(zone, str):
        raise errors.ConfigError('zone must be a string')

    ttl = data.get('ttl')
    if ttl is not None and (isinstance(ttl, bool) or not isinstance(ttl, int)):
        raise errors.ConfigError('ttl must be an integer number of seconds')

    config = SolverConfig(server_url=server_url.rstrip('/'),
                          auth_token_secret_ref=SecretKeySelector(str(ref['name']),
                                                                  str(ref['key'])),
                          zone=zone,
                          ttl=ttl)
    logger.debug('Loaded solver config for %s', config.server_url)
    return config
