# tests/collectors/test_ownership.py

import pytest

from kubeshift.collectors.ownership import AllClaimsOwnership, ProvisionerOwnership, ownership_from_config


@pytest.mark.asyncio
async def test_all_claims_are_owned(builders):
    assert await AllClaimsOwnership().owns(builders.claim("data-pvc", "ns1")) is True


@pytest.mark.asyncio
async def test_provisioner_annotation_decides(builders):
    oracle = ProvisionerOwnership(["pxd.portworx.com"])

    assert await oracle.owns(builders.claim("a", "ns1", provisioner="pxd.portworx.com")) is True
    assert await oracle.owns(builders.claim("b", "ns1", provisioner="ebs.csi.aws.com")) is False


@pytest.mark.asyncio
async def test_statically_bound_claim_matches_storage_class(builders):
    oracle = ProvisionerOwnership(["pxd.portworx.com"], storage_classes=["px-db"])

    assert await oracle.owns(builders.claim("a", "ns1", storage_class="px-db")) is True
    assert await oracle.owns(builders.claim("b", "ns1", storage_class="gp2")) is False
    assert await oracle.owns(builders.claim("c", "ns1")) is False


def test_ownership_from_config():
    assert isinstance(ownership_from_config([]), AllClaimsOwnership)
    oracle = ownership_from_config(["pxd.portworx.com"])
    assert isinstance(oracle, ProvisionerOwnership)
    assert oracle.provisioners == frozenset({"pxd.portworx.com"})
