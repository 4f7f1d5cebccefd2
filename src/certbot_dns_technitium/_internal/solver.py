"""DNS-01 challenge solver backed by Technitium DNS Server."""
import logging
import threading
from collections.abc import Mapping
from typing import Any
from typing import NamedTuple
from typing import Optional
from typing import Union

from certbot import errors

from certbot_dns_technitium._internal import config as solver_config
from certbot_dns_technitium._internal.client import Deadline
from certbot_dns_technitium._internal.client import HTTPTransport
from certbot_dns_technitium._internal.connector import Connector
from certbot_dns_technitium._internal.connector import ConnectorFactory
from certbot_dns_technitium._internal.connector import technitium_connector_factory
from certbot_dns_technitium._internal.errors import SecretError
from certbot_dns_technitium._internal.secret_store import SecretStore

logger = logging.getLogger(__name__)

SOLVER_NAME = 'technitium'


class ChallengeContext(NamedTuple):
    """One challenge as handed over by the orchestrator.

    :ivar str resolved_fqdn: Record name to publish, e.g.
        ``_acme-challenge.example.com.``.
    :ivar str resolved_zone: Zone already determined by the orchestrator.
    :ivar str key: Challenge token, published as the TXT value.
    :ivar str resource_namespace: Scope used for secret lookups.
    :ivar config: Raw solver configuration (JSON text or decoded mapping).
    :ivar int ttl: TTL taking precedence over the configured one.

    """
    resolved_fqdn: str
    key: str
    resource_namespace: str
    config: Union[bytes, str, Mapping[str, Any], None]
    resolved_zone: Optional[str] = None
    ttl: Optional[int] = None


class TechnitiumSolver:
    """Presents and cleans up DNS-01 challenges.

    Each call is independent: it decodes the configuration, fetches the API
    token, and talks to the DNS server once. The HTTP transport is the only
    state shared between calls.

    :param HTTPTransport transport: Transport shared by all connectors.
        Created (and owned) by the solver when both it and
        ``connector_factory`` are omitted.
    :param callable connector_factory: Builds a `.Connector` from a server
        URL and API token. Defaults to `.TechnitiumConnector` over
        ``transport``.
    :param float timeout: Overall time limit of one ``present`` or
        ``clean_up`` call.

    """
    name = SOLVER_NAME

    def __init__(self, transport: Optional[HTTPTransport] = None,
                 connector_factory: Optional[ConnectorFactory] = None,
                 timeout: Optional[float] = None) -> None:
        self._owns_transport = False
        if connector_factory is None:
            if transport is None:
                transport = HTTPTransport()
                self._owns_transport = True
            connector_factory = technitium_connector_factory(transport)
        self.transport: Optional[HTTPTransport] = transport
        self.connector_factory = connector_factory
        self.timeout = timeout
        self.secret_store: Optional[SecretStore] = None
        self._stop_event: Optional[threading.Event] = None

    def initialize(self, secret_store: SecretStore,
                   stop_event: Optional[threading.Event] = None) -> None:
        """Wire in the secret store before the first challenge.

        :param SecretStore secret_store: Source of API tokens.
        :param threading.Event stop_event: Set on shutdown to abort
            requests in flight.

        """
        logger.info('Initializing Technitium DNS solver')
        self.secret_store = secret_store
        self._stop_event = stop_event

    def close(self) -> None:
        """Release the transport if this solver created it."""
        if self._owns_transport and self.transport is not None:
            self.transport.close()

    def present(self, ch: ChallengeContext) -> None:
        """Create the TXT record for a challenge.

        :raises certbot.errors.PluginError: if the record could not be created

        """
        logger.info('Presenting challenge for domain %s', ch.resolved_fqdn)
        deadline = self._deadline()
        connector, zone, ttl = self._connector_for(ch, deadline)

        connector.create_txt_record(zone, ch.resolved_fqdn, ch.key, ttl, deadline)
        logger.info('Successfully presented challenge for domain %s', ch.resolved_fqdn)

    def clean_up(self, ch: ChallengeContext) -> None:
        """Delete the TXT record for a challenge. Missing records are fine.

        :raises certbot.errors.PluginError: if the record could not be deleted

        """
        logger.info('Cleaning up challenge for domain %s', ch.resolved_fqdn)
        deadline = self._deadline()
        connector, zone, _ = self._connector_for(ch, deadline)

        connector.delete_txt_record(zone, ch.resolved_fqdn, ch.key, deadline)
        logger.info('Successfully cleaned up challenge for domain %s', ch.resolved_fqdn)

    def _deadline(self) -> Deadline:
        return Deadline(self.timeout, self._stop_event)

    def _connector_for(self, ch: ChallengeContext,
                       deadline: Deadline) -> tuple[Connector, str, int]:
        if self.secret_store is None:
            raise errors.Error('Solver has not been initialized.')
        cfg = solver_config.load_config(ch.config)
        auth_token = self._get_auth_token(cfg, ch.resource_namespace)
        ttl = solver_config.effective_ttl(ch.ttl, cfg.ttl)

        connector = self.connector_factory(cfg.server_url, auth_token)

        zone = cfg.zone or ch.resolved_zone
        if not zone:
            logger.info('Zone not specified, attempting to find authoritative zone for %s',
                        ch.resolved_fqdn)
            zone = connector.find_authoritative_zone(ch.resolved_fqdn, deadline)
            logger.info('Found authoritative zone: %s', zone)

        return connector, zone, ttl

    def _get_auth_token(self, cfg: solver_config.SolverConfig, namespace: str) -> str:
        assert self.secret_store is not None
        ref = cfg.auth_token_secret_ref
        value = self.secret_store.get_secret_value(namespace, ref.name, ref.key)
        try:
            token = value.decode('utf-8').strip()
        except UnicodeDecodeError:
            raise SecretError('key {0!r} in secret {1!r} is not valid UTF-8'
                              .format(ref.key, ref.name))
        if not token:
            raise SecretError('key {0!r} in secret {1!r} is empty'.format(ref.key, ref.name))
        return token
