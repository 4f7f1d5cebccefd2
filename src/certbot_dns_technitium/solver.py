"""DNS-01 solver for orchestrators other than Certbot.

.. code-block:: python

   solver = TechnitiumSolver()
   solver.initialize(KubernetesSecretStore.from_config())
   solver.present(ChallengeContext(
       resolved_fqdn='_acme-challenge.example.com.',
       key='challenge-token',
       resource_namespace='cert-manager',
       config={'serverUrl': 'https://dns.example.com:53443',
               'authTokenSecretRef': {'name': 'technitium', 'key': 'token'}},
   ))

"""
from certbot_dns_technitium._internal.client import Deadline
from certbot_dns_technitium._internal.client import HTTPTransport
from certbot_dns_technitium._internal.config import SolverConfig
from certbot_dns_technitium._internal.config import load_config
from certbot_dns_technitium._internal.connector import Connector
from certbot_dns_technitium._internal.connector import TechnitiumConnector
from certbot_dns_technitium._internal.errors import APIError
from certbot_dns_technitium._internal.errors import ConfigError
from certbot_dns_technitium._internal.errors import SecretError
from certbot_dns_technitium._internal.errors import TechnitiumError
from certbot_dns_technitium._internal.errors import TransportError
from certbot_dns_technitium._internal.errors import ZoneNotFoundError
from certbot_dns_technitium._internal.secret_store import KubernetesSecretStore
from certbot_dns_technitium._internal.secret_store import SecretStore
from certbot_dns_technitium._internal.solver import ChallengeContext
from certbot_dns_technitium._internal.solver import TechnitiumSolver

__all__ = [
    'APIError',
    'ChallengeContext',
    'ConfigError',
    'Connector',
    'Deadline',
    'HTTPTransport',
    'KubernetesSecretStore',
    'SecretError',
    'SecretStore',
    'SolverConfig',
    'TechnitiumConnector',
    'TechnitiumError',
    'TechnitiumSolver',
    'TransportError',
    'ZoneNotFoundError',
    'load_config',
]
