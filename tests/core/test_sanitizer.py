# tests/core/test_sanitizer.py

import pytest

from kubeshift.core.exceptions import SanitizationError
from kubeshift.core.sanitizer import PREPARE_RULES, prepare_resource, prepare_resources
from kubeshift.models.resource import UnstructuredResource


def _wrap(builders, *args, **kwargs):
    return UnstructuredResource(builders.object(*args, **kwargs))


def test_status_and_bookkeeping_metadata_are_removed(builders):
    content = builders.object(
        "Deployment",
        "api",
        "ns1",
        api_version="apps/v1",
        labels={"app": "api"},
        spec={"replicas": 2},
        status={"readyReplicas": 2},
    )
    content["metadata"]["annotations"] = {"owner": "team-a"}
    content["metadata"]["ownerReferences"] = [{"kind": "Thing", "name": "x"}]
    content["metadata"]["generation"] = 4

    obj = prepare_resource(UnstructuredResource(content))

    assert "status" not in obj.content
    assert obj.metadata == {
        "name": "api",
        "namespace": "ns1",
        "labels": {"app": "api"},
        "annotations": {"owner": "team-a"},
    }
    assert obj.content["spec"] == {"replicas": 2}


def test_metadata_keeps_only_fields_present_in_input(builders):
    obj = prepare_resource(_wrap(builders, "ClusterRole", "reader", api_version="rbac.authorization.k8s.io/v1"))

    assert set(obj.metadata) == {"name"}


def test_volume_loses_claim_and_storage_class(builders):
    obj = _wrap(
        builders,
        "PersistentVolume",
        "pv-data",
        spec={
            "capacity": {"storage": "1Gi"},
            "claimRef": {"name": "data-pvc", "namespace": "ns1"},
            "storageClassName": "fast",
        },
        status={"phase": "Bound"},
    )

    prepare_resource(obj)

    assert obj.content["spec"] == {"capacity": {"storage": "1Gi"}}
    assert "status" not in obj.content


def test_headless_service_keeps_cluster_ip(builders):
    obj = _wrap(builders, "Service", "db", "ns1", spec={"clusterIP": "None", "clusterIPs": ["None"], "ports": []})

    prepare_resource(obj)

    assert obj.content["spec"]["clusterIP"] == "None"
    assert obj.content["spec"]["clusterIPs"] == ["None"]


def test_service_cluster_ip_is_removed(builders):
    obj = _wrap(builders, "Service", "web", "ns1", spec={"clusterIP": "10.0.0.12", "clusterIPs": ["10.0.0.12"]})

    prepare_resource(obj)

    assert "clusterIP" not in obj.content["spec"]
    assert "clusterIPs" not in obj.content["spec"]


def test_service_without_cluster_ip_is_left_alone(builders):
    obj = _wrap(builders, "Service", "ext", "ns1", spec={"type": "ExternalName", "externalName": "example.com"})

    prepare_resource(obj)

    assert obj.content["spec"] == {"type": "ExternalName", "externalName": "example.com"}


def test_service_with_mistyped_cluster_ip_is_an_error(builders):
    obj = _wrap(builders, "Service", "web", "ns1", spec={"clusterIP": ["10.0.0.12"]})

    with pytest.raises(SanitizationError, match="web"):
        prepare_resource(obj)


def test_volume_without_spec_is_an_error(builders):
    obj = _wrap(builders, "PersistentVolume", "pv-broken")

    with pytest.raises(SanitizationError, match="pv-broken"):
        prepare_resource(obj)


def test_object_without_metadata_is_an_error():
    obj = UnstructuredResource({"apiVersion": "v1", "kind": "ConfigMap", "data": {}})

    with pytest.raises(SanitizationError):
        prepare_resource(obj)


def test_prepare_resources_handles_every_object(builders):
    objects = [
        _wrap(builders, "ConfigMap", "a", "ns1", status={"x": 1}),
        _wrap(builders, "Secret", "b", "ns1", status={"x": 1}),
    ]

    prepared = prepare_resources(objects)

    assert prepared == objects
    assert all("status" not in obj.content and "uid" not in obj.metadata for obj in prepared)


def test_registered_rewrites():
    assert set(PREPARE_RULES) == {"PersistentVolume", "Service"}
