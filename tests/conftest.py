# tests/conftest.py

import copy
import itertools
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from kubernetes_asyncio import client

from kubeshift.collectors.resource_collector import ResourceCollector
from kubeshift.core.exceptions import NotFoundError
from kubeshift.models.resource import APIResourceGroup, KindDescriptor, UnstructuredResource
from kubeshift.utils.k8s_utils import labels_match

_VERBS = ["create", "delete", "get", "list", "patch", "update", "watch"]


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """
    Pytest fixture to mock environment variables for the config module.

    This fixture runs automatically for every test (`autouse=True`), so the
    configuration is predictable and isolated from the actual environment.
    """
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("KUBESHIFT_EXCLUDED_GROUPS", raising=False)
    monkeypatch.delenv("KUBESHIFT_OWNED_PROVISIONERS", raising=False)
    monkeypatch.delenv("KUBESHIFT_KUBE_CONTEXT", raising=False)
    monkeypatch.setenv("KUBESHIFT_LIST_PAGE_SIZE", "500")


_uids = itertools.count(1)


def build_object(kind, name, namespace="", api_version="v1", labels=None, uid=None, **fields):
    """Builds the dict form of an object as the API server returns it."""
    metadata = {
        "name": name,
        "uid": uid or f"uid-{next(_uids)}",
        "resourceVersion": "12345",
        "creationTimestamp": "2024-01-01T00:00:00Z",
    }
    if namespace:
        metadata["namespace"] = namespace
    if labels is not None:
        metadata["labels"] = dict(labels)
    obj = {"apiVersion": api_version, "kind": kind, "metadata": metadata}
    obj.update(copy.deepcopy(fields))
    return obj


def build_claim(name, namespace, phase="Bound", labels=None, provisioner=None, storage_class=None):
    annotations = {}
    if provisioner:
        annotations["volume.kubernetes.io/storage-provisioner"] = provisioner
    return client.V1PersistentVolumeClaim(
        metadata=client.V1ObjectMeta(name=name, namespace=namespace, labels=labels, annotations=annotations or None),
        spec=client.V1PersistentVolumeClaimSpec(storage_class_name=storage_class),
        status=client.V1PersistentVolumeClaimStatus(phase=phase),
    )


def build_binding(name, role, namespaces):
    binding = MagicMock(spec=client.V1ClusterRoleBinding)
    binding.metadata = client.V1ObjectMeta(name=name)
    binding.role_ref = client.V1RoleRef(api_group="rbac.authorization.k8s.io", kind="ClusterRole", name=role)
    binding.subjects = [SimpleNamespace(kind="ServiceAccount", name="sa", namespace=ns) for ns in namespaces]
    return binding


class FakeCluster:
    """
    In-memory stand-in for discovery, listing and typed lookups.

    Listing returns deep copies, like separate API responses would.
    """

    def __init__(self):
        self.groups = []
        self.objects = {}
        self.claims = {}
        self.bindings = {}
        self.owned = None
        self.list_calls = []
        self.refresh_count = 0
        self.binding_list_count = 0

    # --- discovery ---
    def add_group(self, group_version, *kinds):
        group, _, version = group_version.rpartition("/")
        descriptors = [
            KindDescriptor(group=group, version=version, kind=kind, name=plural, namespaced=namespaced, verbs=_VERBS)
            for kind, plural, namespaced in kinds
        ]
        self.groups.append(APIResourceGroup(group_version=group_version, resources=descriptors))

    async def refresh(self):
        self.refresh_count += 1

    def resources(self):
        return list(self.groups)

    # --- listing ---
    def add(self, group_version, plural, obj):
        self.objects.setdefault((group_version, plural), []).append(obj)
        return obj

    async def list(self, descriptor, namespace=None, label_selectors=None):
        self.list_calls.append((descriptor.group_version, descriptor.kind, namespace, dict(label_selectors or {})))
        result = []
        for item in self.objects.get((descriptor.group_version, descriptor.name), []):
            metadata = item["metadata"]
            if descriptor.namespaced and metadata.get("namespace") != namespace:
                continue
            if not labels_match(label_selectors, metadata.get("labels")):
                continue
            result.append(UnstructuredResource(copy.deepcopy(item)))
        return result

    # --- typed lookups ---
    async def get_claim(self, name, namespace):
        try:
            return self.claims[(namespace, name)]
        except KeyError:
            raise NotFoundError(f"PersistentVolumeClaim {namespace}/{name} not found")

    async def get_cluster_role_binding(self, name):
        try:
            return self.bindings[name]
        except KeyError:
            raise NotFoundError(f"ClusterRoleBinding {name} not found")

    async def list_cluster_role_bindings(self):
        self.binding_list_count += 1
        return list(self.bindings.values())

    # --- ownership ---
    async def owns(self, claim):
        if self.owned is None:
            return True
        return (claim.metadata.namespace, claim.metadata.name) in self.owned


@pytest.fixture
def builders():
    """Object builders shared by the tests."""
    return SimpleNamespace(object=build_object, claim=build_claim, binding=build_binding)


@pytest.fixture
def fake_cluster():
    """A cluster with the standard groups and a claim "data-pvc" in "ns1" labelled app=db."""
    cluster = FakeCluster()
    cluster.add_group(
        "v1",
        ("PersistentVolumeClaim", "persistentvolumeclaims", True),
        ("PersistentVolume", "persistentvolumes", False),
        ("ConfigMap", "configmaps", True),
        ("Secret", "secrets", True),
        ("Service", "services", True),
        ("ServiceAccount", "serviceaccounts", True),
        ("Pod", "pods", True),
    )
    cluster.add_group(
        "apps/v1",
        ("Deployment", "deployments", True),
        ("StatefulSet", "statefulsets", True),
        ("DaemonSet", "daemonsets", True),
    )
    cluster.add_group("extensions/v1beta1", ("Deployment", "deployments", True))
    cluster.add_group(
        "rbac.authorization.k8s.io/v1",
        ("ClusterRole", "clusterroles", False),
        ("ClusterRoleBinding", "clusterrolebindings", False),
    )

    cluster.add(
        "v1",
        "persistentvolumeclaims",
        build_object(
            "PersistentVolumeClaim",
            "data-pvc",
            "ns1",
            labels={"app": "db"},
            spec={"volumeName": "pv-data", "storageClassName": "fast"},
            status={"phase": "Bound"},
        ),
    )
    cluster.claims[("ns1", "data-pvc")] = build_claim("data-pvc", "ns1", labels={"app": "db"})
    return cluster


@pytest.fixture
def make_collector(fake_cluster):
    """Returns a factory for collectors wired to the fake cluster."""

    async def _make(**kwargs):
        kwargs.setdefault("ownership", fake_cluster)
        collector = ResourceCollector(discovery=fake_cluster, lister=fake_cluster, peek=fake_cluster, **kwargs)
        return await collector.init()

    return _make


API_HOST = "https://kube.test"


class FakeHTTPResponse:
    """Stands in for the REST response kubernetes_asyncio reads status, headers and body from."""

    def __init__(self, body, status=200, reason="OK"):
        self.status = status
        self.reason = reason
        self.data = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
        self._headers = {"content-type": "application/json"}

    def getheaders(self):
        return self._headers

    def getheader(self, name, default=None):
        return self._headers.get(name.lower(), default)


@pytest.fixture
def http_response():
    return FakeHTTPResponse


@pytest.fixture
async def real_api_client():
    """
    A real ApiClient whose transport is replaced by an AsyncMock.

    Requests still go through ApiClient.call_api, so its signature and the
    response deserialization are exercised.
    """
    api_client = client.ApiClient(client.Configuration(host=API_HOST))
    api_client.rest_client.request = AsyncMock()
    yield api_client
    await api_client.close()
