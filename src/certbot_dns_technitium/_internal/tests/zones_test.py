"""Tests for certbot_dns_technitium._internal.zones."""
import json
import sys
import threading
import unittest
from unittest import mock

import pytest
import requests
import requests_mock

from certbot_dns_technitium._internal import errors
from certbot_dns_technitium._internal.client import Deadline
from certbot_dns_technitium._internal.client import HTTPTransport
from certbot_dns_technitium._internal.client import TechnitiumClient
from certbot_dns_technitium._internal.zones import Zone
from certbot_dns_technitium._internal.zones import ZoneResolver
from certbot_dns_technitium._internal.zones import parse_zone_response

SERVER_URL = 'http://dns.example.com'
LOOKUP_URL = SERVER_URL + '/api/zones/records/get'
TOKEN = 'token'


def _zone_body(name, disabled=False):
    return json.dumps({
        'status': 'ok',
        'response': {
            'zone': {'name': name, 'type': 'Primary', 'internal': False,
                     'dnssecStatus': 'Unsigned', 'disabled': disabled},
            'records': [],
        },
    })


class ParseZoneResponseTest(unittest.TestCase):

    def test_ok(self):
        zone = parse_zone_response(_zone_body('example.com').encode())

        assert zone == Zone(name='example.com', kind='Primary', dnssec_status='Unsigned',
                            disabled=False)

    def test_disabled(self):
        assert parse_zone_response(_zone_body('example.com', disabled=True).encode()).disabled

    def test_error_status(self):
        body = b'{"status": "error", "errorMessage": "No such zone was found: example.org"}'

        assert parse_zone_response(body) is None

    def test_invalid_json(self):
        with pytest.raises(ValueError):
            parse_zone_response(b'<html>Bad Gateway</html>')

    def test_not_an_object(self):
        with pytest.raises(ValueError):
            parse_zone_response(b'["ok"]')

    def test_malformed_response(self):
        with pytest.raises(ValueError):
            parse_zone_response(b'{"status": "ok", "response": ["zone"]}')


class ZoneResolverTest(unittest.TestCase):
    """Runs the resolver against a fake server knowing ``self.zones``."""

    def setUp(self):
        self.zones = {}
        self.queried = []
        self.failing = set()

        self.transport = HTTPTransport()
        self.adapter = requests_mock.Adapter(case_sensitive=True)
        self.transport.session.mount('http://', self.adapter)
        self.adapter.register_uri('GET', LOOKUP_URL, text=self._lookup)

        self.resolver = ZoneResolver(TechnitiumClient(SERVER_URL, TOKEN, self.transport))

    def _lookup(self, request, context):
        domain = request.qs['domain'][0]
        assert request.qs['token'] == [TOKEN]
        assert request.qs['listZone'] == ['false']
        self.queried.append(domain)
        if domain in self.failing:
            raise requests.exceptions.ConnectionError('connection refused')
        if domain in self.zones:
            return _zone_body(domain, disabled=self.zones[domain])
        return json.dumps({'status': 'error',
                           'errorMessage': 'No such zone was found: ' + domain})

    def test_most_specific_zone(self):
        self.zones = {'bar.example.com': False, 'example.com': False}

        zone = self.resolver.find_authoritative_zone('_acme-challenge.foo.bar.example.com.')

        assert zone == 'bar.example.com'
        assert self.queried == ['_acme-challenge.foo.bar.example.com',
                                'foo.bar.example.com',
                                'bar.example.com']

    def test_each_response_released(self):
        self.zones = {'bar.example.com': False}

        with mock.patch.object(requests.Response, 'close', autospec=True,
                               side_effect=requests.Response.close) as mock_close:
            self.resolver.find_authoritative_zone('_acme-challenge.foo.bar.example.com.')

        assert len(self.queried) == 3
        assert mock_close.call_count == 3
        for call in mock_close.call_args_list:
            response = call.args[0]
            assert response._content_consumed  # pylint: disable=protected-access

    def test_apex_zone(self):
        self.zones = {'example.com': False}

        assert self.resolver.find_authoritative_zone('_acme-challenge.example.com') == \
            'example.com'
        assert self.queried == ['_acme-challenge.example.com', 'example.com']

    def test_disabled_zone_skipped(self):
        self.zones = {'bar.example.com': True, 'example.com': False}

        assert self.resolver.find_authoritative_zone('_acme-challenge.bar.example.com') == \
            'example.com'

    def test_only_disabled_zones(self):
        self.zones = {'example.com': True}

        with pytest.raises(errors.ZoneNotFoundError):
            self.resolver.find_authoritative_zone('_acme-challenge.example.com')

    def test_not_found_names_requested_fqdn(self):
        fqdn = '_acme-challenge.foo.example.org.'

        with pytest.raises(errors.ZoneNotFoundError) as exc_info:
            self.resolver.find_authoritative_zone(fqdn)

        assert exc_info.value.fqdn == fqdn
        assert fqdn in str(exc_info.value)
        assert self.queried == ['_acme-challenge.foo.example.org', 'foo.example.org',
                                'example.org', 'org']

    def test_all_lookups_fail(self):
        fqdn = '_acme-challenge.example.com.'
        self.zones = {'example.com': False}
        self.failing = {'_acme-challenge.example.com', 'example.com', 'com'}

        with pytest.raises(errors.ZoneNotFoundError) as exc_info:
            self.resolver.find_authoritative_zone(fqdn)

        assert exc_info.value.fqdn == fqdn
        assert len(self.queried) == 3

    def test_failed_lookup_skips_candidate(self):
        self.zones = {'bar.example.com': False, 'example.com': False}
        self.failing = {'bar.example.com'}

        assert self.resolver.find_authoritative_zone('_acme-challenge.bar.example.com') == \
            'example.com'

    def test_malformed_response_skips_candidate(self):
        self.adapter.register_uri('GET', LOOKUP_URL, [
            {'text': 'not json'},
            {'text': _zone_body('example.com')},
        ])

        assert self.resolver.find_authoritative_zone('_acme-challenge.example.com') == \
            'example.com'

    def test_cancelled_search(self):
        self.zones = {'example.com': False}
        stop_event = threading.Event()
        stop_event.set()

        with pytest.raises(errors.ZoneNotFoundError):
            self.resolver.find_authoritative_zone('_acme-challenge.example.com',
                                                  Deadline(stop_event=stop_event))

        assert not self.queried

    def test_lookup_zone(self):
        self.zones = {'example.com': False}

        assert self.resolver.lookup_zone('example.com').name == 'example.com'
        assert self.resolver.lookup_zone('example.org') is None


if __name__ == "__main__":
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
