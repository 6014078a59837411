# tests/models/test_resource.py

import pytest
from pydantic import ValidationError

from kubeshift.core.exceptions import CastError
from kubeshift.models.resource import CollectionRequest, KindDescriptor, UnstructuredResource


def test_identity_accessors(builders):
    content = builders.object("Secret", "creds", "ns1", labels={"app": "db"}, uid="abc")
    content["metadata"]["annotations"] = {"note": "x"}
    obj = UnstructuredResource(content)

    assert obj.kind == "Secret"
    assert obj.api_version == "v1"
    assert obj.name == "creds"
    assert obj.namespace == "ns1"
    assert obj.uid == "abc"
    assert obj.labels == {"app": "db"}
    assert obj.annotations == {"note": "x"}
    assert obj.describe() == "ns1/creds"
    assert repr(obj) == "<Secret ns1/creds>"
    assert obj.to_dict() is content


def test_cluster_scoped_object_has_empty_namespace(builders):
    obj = UnstructuredResource(builders.object("ClusterRole", "reader"))

    assert obj.namespace == ""
    assert obj.labels == {}
    assert obj.describe() == "reader"


def test_non_mapping_content_is_rejected():
    with pytest.raises(CastError):
        UnstructuredResource(["not", "an", "object"])


def test_kind_descriptor_group_version():
    core = KindDescriptor(version="v1", kind="Secret", name="secrets", namespaced=True)
    apps = KindDescriptor(group="apps", version="v1", kind="Deployment", name="deployments", namespaced=True)

    assert core.group_version == "v1"
    assert apps.group_version == "apps/v1"


def test_collection_request_validation():
    request = CollectionRequest(namespaces=["ns1", "ns2"])
    assert request.label_selectors == {}

    with pytest.raises(ValidationError):
        CollectionRequest(namespaces=[])
    with pytest.raises(ValidationError):
        CollectionRequest(namespaces=["ns1", ""])
    with pytest.raises(ValidationError):
        CollectionRequest(namespaces=["ns1", "ns1"])
