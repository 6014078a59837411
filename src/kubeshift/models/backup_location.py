# src/kubeshift/models/backup_location.py
"""
Backup destinations (S3-compatible, Azure Blob Storage, Google Cloud Storage).

Credentials can be given inline or through a Secret named by
``secretConfig``; values from the Secret override the inline ones.
"""

import base64
import binascii
import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from kubernetes_asyncio import client
from kubernetes_asyncio.client.rest import ApiException
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import BackupLocationError
from ..core.k8s_client import CONNECTION_ERRORS

logger = logging.getLogger(__name__)

BACKUP_LOCATION_GROUP = "stork.libopenstorage.org"
BACKUP_LOCATION_VERSION = "v1alpha1"
BACKUP_LOCATION_PLURAL = "backuplocations"

DEFAULT_S3_ENDPOINT = "s3.amazonaws.com"
DEFAULT_S3_REGION = "us-east-1"


class BackupLocationType(str, Enum):
    S3 = "s3"
    AZURE = "azure"
    GOOGLE = "google"


class _LocationModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class S3Config(_LocationModel):
    # Endpoint and region are defaulted when the config comes from a Secret only
    endpoint: str = ""
    access_key_id: str = Field("", alias="accessKeyID")
    secret_access_key: str = Field("", alias="secretAccessKey")
    region: str = ""


class AzureConfig(_LocationModel):
    storage_account_name: str = Field("", alias="storageAccountName")
    storage_account_key: str = Field("", alias="storageAccountKey")


class GoogleConfig(_LocationModel):
    project_id: str = Field("", alias="projectID")
    account_key: str = Field("", alias="accountKey")


class BackupLocationItem(_LocationModel):
    """Only the config matching ``type`` is used."""

    type: BackupLocationType
    path: str = Field("", description="Bucket or other path of the backup location")
    s3_config: Optional[S3Config] = Field(None, alias="s3Config")
    azure_config: Optional[AzureConfig] = Field(None, alias="azureConfig")
    google_config: Optional[GoogleConfig] = Field(None, alias="googleConfig")
    secret_config: str = Field("", alias="secretConfig")


# Secret key -> config attribute, per location type
_SECRET_FIELDS = {
    BackupLocationType.S3: {
        "endpoint": "endpoint",
        "accessKeyID": "access_key_id",
        "secretAccessKey": "secret_access_key",
        "region": "region",
    },
    BackupLocationType.AZURE: {
        "storageAccountName": "storage_account_name",
        "storageAccountKey": "storage_account_key",
    },
    BackupLocationType.GOOGLE: {
        "projectID": "project_id",
        "accountKey": "account_key",
    },
}

SECRET_ATTRIBUTES = frozenset(("access_key_id", "secret_access_key", "storage_account_key", "account_key"))


def _decode_secret_data(data: Optional[Mapping[str, str]]) -> Dict[str, str]:
    decoded = {}
    for key, value in (data or {}).items():
        try:
            text = base64.b64decode(value).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise BackupLocationError(f"Secret key '{key}' is not valid base64 text") from e
        decoded[key] = text[:-1] if text.endswith("\n") else text
    return decoded


class BackupLocation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    namespace: str
    location: BackupLocationItem

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "BackupLocation":
        """Builds a BackupLocation from the custom resource's JSON form."""
        metadata = manifest.get("metadata") or {}
        try:
            location = BackupLocationItem.model_validate(manifest.get("location") or {})
        except ValidationError as e:
            raise BackupLocationError(f"Invalid BackupLocation {metadata.get('name', '')}: {e}") from e
        return cls(name=metadata.get("name", ""), namespace=metadata.get("namespace", ""), location=location)

    def _config_for_type(self) -> BaseModel:
        location = self.location
        if location.type == BackupLocationType.S3:
            if location.s3_config is None:
                location.s3_config = S3Config(endpoint=DEFAULT_S3_ENDPOINT, region=DEFAULT_S3_REGION)
            return location.s3_config
        if location.type == BackupLocationType.AZURE:
            if location.azure_config is None:
                location.azure_config = AzureConfig()
            return location.azure_config
        if location.type == BackupLocationType.GOOGLE:
            if location.google_config is None:
                location.google_config = GoogleConfig()
            return location.google_config
        raise BackupLocationError(f"Invalid BackupLocation type {location.type}")

    async def update_from_secret(self, core_api: client.CoreV1Api) -> None:
        """
        Merges the credentials stored in ``secretConfig`` into the location's config.

        Raises:
            BackupLocationError: The Secret can't be read or the type is unknown.
        """
        if not self.location.secret_config:
            return

        target = self._config_for_type()
        try:
            secret = await core_api.read_namespaced_secret(self.location.secret_config, self.namespace)
        except ApiException as e:
            raise BackupLocationError(
                f"error getting secretConfig for backupLocation {self.namespace}/{self.name}: {e.status} {e.reason}"
            ) from e
        except CONNECTION_ERRORS as e:
            raise BackupLocationError(
                f"error getting secretConfig for backupLocation {self.namespace}/{self.name}: {e!r}"
            ) from e

        values = _decode_secret_data(secret.data)
        for secret_key, attribute in _SECRET_FIELDS[self.location.type].items():
            if secret_key in values:
                setattr(target, attribute, values[secret_key])
        logger.debug("Merged secret %s into backup location %s/%s", self.location.secret_config, self.namespace, self.name)

    def redacted(self) -> Dict[str, Any]:
        """Returns the location as a dict with credentials masked."""
        data = self.model_dump(mode="json")
        for key in ("s3_config", "azure_config", "google_config"):
            section = data["location"].get(key)
            if not section:
                continue
            for attribute in SECRET_ATTRIBUTES & section.keys():
                if section[attribute]:
                    section[attribute] = "****"
        return data
