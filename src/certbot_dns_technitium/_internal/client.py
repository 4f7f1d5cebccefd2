"""HTTP transport and client for the Technitium DNS Server API."""
import logging
import threading
import time
from collections.abc import Mapping
from typing import Any
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from certbot_dns_technitium._internal import errors

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_CONNECT_TIMEOUT = 10
DEFAULT_POOL_SIZE = 10
USER_AGENT = 'certbot-dns-technitium'


class Deadline:
    """Bounds a sequence of network calls in time.

    A deadline is spent either when ``timeout`` seconds have elapsed since it
    was created or when ``stop_event`` is set, whichever comes first. Both are
    optional; a deadline with neither never expires.

    :param float timeout: Seconds until the deadline expires.
    :param threading.Event stop_event: Event signalling shutdown.

    """
    def __init__(self, timeout: Optional[float] = None,
                 stop_event: Optional[threading.Event] = None) -> None:
        self._expires_at = time.monotonic() + timeout if timeout is not None else None
        self._stop_event = stop_event

    def remaining(self) -> Optional[float]:
        """Seconds left before expiry, or None if there is no time limit."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def check(self) -> Optional[float]:
        """Raise if the deadline is spent.

        :returns: Seconds left, or None if there is no time limit.
        :rtype: float
        :raises .errors.TransportError: if stopped or expired

        """
        if self._stop_event is not None and self._stop_event.is_set():
            raise errors.TransportError('Request cancelled: shutdown in progress')
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise errors.TransportError('Request cancelled: deadline exceeded')
        return remaining


class HTTPTransport:
    """Connection pool shared by every client in the process.

    Owns a single `requests.Session`. The session only carries
    configuration (pool, headers), never per-request state, so one transport
    may be used concurrently by any number of clients.

    :param float request_timeout: Read timeout of a single request.
    :param float connect_timeout: Timeout to establish a connection,
        including the TLS handshake.
    :param int pool_size: Maximum number of pooled connections per host.

    """
    def __init__(self, request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
                 connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
                 pool_size: int = DEFAULT_POOL_SIZE,
                 user_agent: str = USER_AGENT) -> None:
        self.request_timeout = request_timeout
        self.connect_timeout = connect_timeout
        self.session = requests.Session()
        # Payloads are small JSON documents.
        self.session.headers['Accept-Encoding'] = 'identity'
        self.session.headers['User-Agent'] = user_agent
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size,
                              max_retries=0)
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)

    def __enter__(self) -> 'HTTPTransport':
        return self

    def __exit__(self, *unused_args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close all pooled connections."""
        self.session.close()

    def request(self, method: str, url: str, deadline: Optional[Deadline] = None,
                **kwargs: Any) -> bytes:
        """Send a request and return the full response body.

        The response is read completely and released back to the pool
        before returning.

        :raises .errors.TransportError: on any network failure or timeout

        """
        connect_timeout, read_timeout = self.connect_timeout, self.request_timeout
        if deadline is not None:
            # Both timeouts come from a single reading of the clock.
            remaining = deadline.check()
            if remaining is not None:
                connect_timeout = min(connect_timeout, remaining)
                read_timeout = min(read_timeout, remaining)

        logger.debug('Sending %s request to %s', method, url)
        try:
            with self.session.request(method, url, timeout=(connect_timeout, read_timeout),
                                      **kwargs) as response:
                body = response.content
        except requests.exceptions.RequestException as e:
            raise errors.TransportError('Error communicating with {0}: {1}'
                                        .format(url, e.__class__.__name__)) from e
        logger.debug('Received HTTP %d from %s (%d bytes)', response.status_code, url, len(body))
        return body


class TechnitiumClient:
    """Sends authenticated requests to one Technitium DNS Server.

    Holds one credential (server URL and API token). The token is added to
    every request and is never logged. Bodies are returned undecoded.

    :param str server_url: Base URL of the DNS server's web service.
    :param str auth_token: API token.
    :param HTTPTransport transport: Shared transport.

    """
    def __init__(self, server_url: str, auth_token: str, transport: HTTPTransport) -> None:
        self.server_url = server_url.rstrip('/')
        self._auth_token = auth_token
        self.transport = transport

    def __repr__(self) -> str:
        return '{0}({1!r})'.format(self.__class__.__name__, self.server_url)

    def _url(self, path: str) -> str:
        return self.server_url + path

    def get_json(self, path: str, params: Mapping[str, str],
                 deadline: Optional[Deadline] = None) -> bytes:
        """GET a JSON endpoint.

        :param str path: API path, e.g. ``/api/zones/records/get``.
        :param dict params: Query parameters, excluding the token.
        :returns: The raw response body.
        :rtype: bytes
        :raises .errors.TransportError: on network failure

        """
        query = {'token': self._auth_token}
        query.update(params)
        return self.transport.request('GET', self._url(path), deadline, params=query)

    def post_form(self, path: str, fields: Mapping[str, str],
                  deadline: Optional[Deadline] = None) -> bytes:
        """POST a form-encoded body.

        :param str path: API path, e.g. ``/api/zones/records/add``.
        :param dict fields: Form fields, excluding the token.
        :returns: The raw response body.
        :rtype: bytes
        :raises .errors.TransportError: on network failure

        """
        data = {'token': self._auth_token}
        data.update(fields)
        return self.transport.request('POST', self._url(path), deadline, data=data)
