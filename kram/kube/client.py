from __future__ import annotations
import base64
import json
from typing import Any, Dict, Iterable, List, Optional
from kubernetes import config as k8s_config, client as k8s_client
from kubernetes.client.exceptions import ApiException
import urllib3
import yaml
from ..errors import FetchError, InitError
from ..metrics.correlate import ContainerSpec, PodSpec, ResourcePair, UsageSample
from ..util import logging as log
from .quantity import resource_list

METRICS_API = '/apis/metrics.k8s.io/v1beta1'


def configure_from_credentials(credentials) -> k8s_client.Configuration:
    cfg = k8s_client.Configuration()
    cfg.host = credentials.host
    if credentials.token:
        cfg.api_key = {"authorization": credentials.token}
        cfg.api_key_prefix = {"authorization": "Bearer"}
        log.debug('using bearer token', host=credentials.host)
    elif credentials.username and credentials.password:
        basic_auth = base64.b64encode(f"{credentials.username}:{credentials.password}".encode()).decode()
        cfg.api_key = {"authorization": f"Basic {basic_auth}"}
    if credentials.ca_file:
        cfg.ssl_ca_cert = credentials.ca_file
    cfg.verify_ssl = credentials.verify_ssl
    if not credentials.verify_ssl:
        urllib3.disable_warnings()
        log.warn('ssl_verification_disabled', host=credentials.host)
    return cfg


def build_api_client(kubeconfig: Optional[str] = None, context: Optional[str] = None, credentials=None) -> k8s_client.ApiClient:
    """Build the API client from explicit credentials or a kubeconfig file.

    Any failure here is fatal for the run and raised as InitError.
    """
    try:
        if credentials is not None:
            return k8s_client.ApiClient(configuration=configure_from_credentials(credentials))
        configuration = k8s_client.Configuration()
        k8s_config.load_kube_config(config_file=kubeconfig, context=context, client_configuration=configuration)
        log.debug('loaded kubeconfig', kubeconfig=kubeconfig, context=context)
        return k8s_client.ApiClient(configuration=configuration)
    except (k8s_config.ConfigException, yaml.YAMLError, OSError, TypeError, ValueError) as e:
        raise InitError(f'cannot build cluster client: {e}') from e


def parse_pod(item: Dict[str, Any]) -> PodSpec:
    meta = item.get('metadata') or {}
    containers: List[ContainerSpec] = []
    for c in (item.get('spec') or {}).get('containers') or []:
        resources = c.get('resources') or {}
        containers.append(ContainerSpec(
            name=c.get('name', ''),
            requests=ResourcePair(*resource_list(resources.get('requests'))),
            limits=ResourcePair(*resource_list(resources.get('limits'))),
        ))
    return PodSpec(name=meta.get('name', ''), containers=tuple(containers))


def parse_usage(item: Dict[str, Any]) -> List[UsageSample]:
    return [
        UsageSample(name=c.get('name', ''), usage=ResourcePair(*resource_list(c.get('usage'))))
        for c in item.get('containers') or []
    ]


class KubeSource:
    """Namespace, pod and pod-metrics listings over the raw API.

    Every call either returns parsed records or raises FetchError. Nothing
    is retried.
    """

    def __init__(self, api_client: k8s_client.ApiClient):
        self.api_client = api_client

    def _get(self, url: str, operation: str, target: str) -> Dict[str, Any]:
        try:
            resp = self.api_client.call_api(url, 'GET', response_type='object', _preload_content=False, auth_settings=['BearerToken'])
            return json.loads(resp[0].data)
        except ApiException as e:
            status = getattr(e, 'status', None)
            raise FetchError(operation, target, f'{status} {e.reason}') from e
        except urllib3.exceptions.HTTPError as e:
            raise FetchError(operation, target, str(e)) from e
        except ValueError as e:
            raise FetchError(operation, target, f'invalid response: {e}') from e

    def _list(self, base: str, operation: str, target: str) -> Iterable[Dict[str, Any]]:
        cont = None
        while True:
            query = f"?continue={cont}" if cont else ''
            payload = self._get(base + query, operation, target)
            for item in payload.get('items', []):
                yield item
            cont = (payload.get('metadata') or {}).get('continue')
            if not cont:
                break

    def list_namespaces(self) -> List[str]:
        log.info('listing namespaces')
        items = list(self._list('/api/v1/namespaces', 'list namespaces', 'cluster'))
        return [(i.get('metadata') or {}).get('name', '') for i in items]

    def list_pods(self, namespace: str) -> List[PodSpec]:
        log.info('listing pods', namespace=namespace)
        items = list(self._list(f'/api/v1/namespaces/{namespace}/pods', 'list pods', namespace))
        try:
            return [parse_pod(i) for i in items]
        except ValueError as e:
            raise FetchError('list pods', namespace, f'invalid resource quantity: {e}') from e

    def get_pod_metrics(self, namespace: str, pod: str) -> List[UsageSample]:
        log.debug('fetching pod metrics', namespace=namespace, pod=pod)
        target = f'{namespace}/{pod}'
        payload = self._get(f'{METRICS_API}/namespaces/{namespace}/pods/{pod}', 'get pod metrics', target)
        try:
            return parse_usage(payload)
        except ValueError as e:
            raise FetchError('get pod metrics', target, f'invalid resource quantity: {e}') from e
