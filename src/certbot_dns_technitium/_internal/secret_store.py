"""Access to the credentials referenced by solver configurations."""
import abc
import base64
import binascii
import logging
from typing import Optional

from kubernetes import client
from kubernetes import config
from kubernetes.client.rest import ApiException

from certbot_dns_technitium._internal import errors

logger = logging.getLogger(__name__)


class SecretStore(metaclass=abc.ABCMeta):
    """Read-only store of named secrets, each holding several keys."""

    @abc.abstractmethod
    def get_secret_value(self, namespace: str, name: str, key: str) -> bytes:  # pragma: no cover
        """
        Return the value stored under ``key`` in secret ``name``.

        :param str namespace: Scope the secret lives in.
        :param str name: Name of the secret.
        :param str key: Key inside the secret.
        :rtype: bytes
        :raises .errors.SecretError: if the secret or the key does not exist
        """
        raise NotImplementedError()


class KubernetesSecretStore(SecretStore):
    """Reads `Secret` objects through the Kubernetes API."""

    def __init__(self, core_v1: Optional[client.CoreV1Api] = None) -> None:
        self._core_v1 = core_v1

    @classmethod
    def from_config(cls, kubeconfig: Optional[str] = None,
                    context: Optional[str] = None) -> 'KubernetesSecretStore':
        """Load cluster credentials and create a store.

        Uses ``kubeconfig`` if given, else the in-cluster service account,
        else the default kubeconfig.
        """
        if kubeconfig:
            config.load_kube_config(config_file=kubeconfig, context=context)
        else:
            try:
                config.load_incluster_config()
            except config.ConfigException:
                logger.debug('Not running in a cluster, loading kubeconfig')
                config.load_kube_config(context=context)
        return cls()

    @property
    def core_v1(self) -> client.CoreV1Api:
        if self._core_v1 is None:
            self._core_v1 = client.CoreV1Api()
        return self._core_v1

    def get_secret_value(self, namespace: str, name: str, key: str) -> bytes:
        logger.debug('Getting secret %s/%s', namespace, name)
        try:
            secret = self.core_v1.read_namespaced_secret(name, namespace)
        except ApiException as e:
            if e.status == 404:
                raise errors.SecretError('secret {0!r} not found in namespace {1!r}'
                                         .format(name, namespace))
            raise errors.SecretError('error getting secret {0}/{1}: {2} {3}'
                                     .format(namespace, name, e.status, e.reason))

        data = secret.data or {}
        if key in data:
            try:
                return base64.b64decode(data[key], validate=True)
            except binascii.Error as e:
                raise errors.SecretError('key {0!r} in secret {1!r} is not valid base64: {2}'
                                         .format(key, name, e))

        string_data = secret.string_data or {}
        if key in string_data:
            return string_data[key].encode('utf-8')

        raise errors.SecretError('key {0!r} not found in secret {1!r}'.format(key, name))
