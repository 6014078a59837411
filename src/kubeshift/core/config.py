# src/kubeshift/core/config.py

import logging
import os
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    """
    Handles the application's configuration by loading values from environment variables.
    """

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --- Kubernetes variables ---
    # Values below are properties so that they are resolved at access time,
    # letting tests and callers change the environment after import.
    @property
    def KUBE_CONTEXT(self) -> Optional[str]:
        return os.getenv("KUBESHIFT_KUBE_CONTEXT") or None

    @property
    def EXCLUDED_GROUPS(self) -> List[str]:
        # "extensions" mirrors workload kinds that also live under "apps"
        raw = os.getenv("KUBESHIFT_EXCLUDED_GROUPS")
        if raw is None:
            return ["extensions"]
        return _split_csv(raw)

    @property
    def LIST_PAGE_SIZE(self) -> int:
        return int(os.getenv("KUBESHIFT_LIST_PAGE_SIZE", "500"))

    @property
    def OWNED_PROVISIONERS(self) -> List[str]:
        """Provisioner names considered owned by the storage backend.

        An empty list means every bound claim is treated as owned.
        """
        return _split_csv(os.getenv("KUBESHIFT_OWNED_PROVISIONERS"))

    def validate_instance(self):
        if self.LOG_LEVEL.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}.")
        try:
            page_size = self.LIST_PAGE_SIZE
        except ValueError as e:
            raise ValueError("KUBESHIFT_LIST_PAGE_SIZE must be an integer.") from e
        if page_size <= 0:
            raise ValueError("KUBESHIFT_LIST_PAGE_SIZE must be a positive integer.")
        if not self.OWNED_PROVISIONERS:
            logging.getLogger(__name__).debug(
                "KUBESHIFT_OWNED_PROVISIONERS is not set; every bound claim is considered owned."
            )


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
