import asyncio
import logging
import typing
from contextlib import asynccontextmanager

import aiohttp
from kubernetes_asyncio import client, config

from .config import config as kubeshift_config
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Transport failures: the API server could not be reached or did not answer in time
CONNECTION_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)

# Guards the one-time configuration load
_CONFIG_LOCK = asyncio.Lock()
_CONFIG_LOADED = False


async def _load_incluster() -> None:
    config.load_incluster_config()


async def _load_kubeconfig() -> None:
    await config.load_kube_config(context=kubeshift_config.KUBE_CONTEXT)


_LOADERS = (
    ("in-cluster config", _load_incluster),
    ("kubeconfig", _load_kubeconfig),
)


async def ensure_k8s_config() -> bool:
    """
    Loads the Kubernetes client configuration once per process.

    In-cluster configuration is tried first, then the local kubeconfig
    (using KUBESHIFT_KUBE_CONTEXT when set).

    Returns:
        bool: True once a configuration is loaded, False if none could be.
    """
    global _CONFIG_LOADED

    if _CONFIG_LOADED:
        return True

    async with _CONFIG_LOCK:
        if _CONFIG_LOADED:
            return True

        for source, loader in _LOADERS:
            try:
                await loader()
            except config.ConfigException as e:
                logger.debug("No %s: %s", source, e)
                continue
            except OSError as e:
                logger.warning(f"Error reading {source}: {e}")
                continue
            logger.info("Loaded Kubernetes configuration from %s.", source)
            _CONFIG_LOADED = True
            return True

    logger.warning("Failed to load any Kubernetes configuration.")
    return False


async def get_api_client() -> typing.Optional[client.ApiClient]:
    """
    Returns an ApiClient bound to the loaded configuration, or None when no
    configuration could be loaded.
    """
    if await ensure_k8s_config():
        return client.ApiClient()
    return None


@asynccontextmanager
async def api_client_session() -> typing.AsyncIterator[client.ApiClient]:
    """Yields an ApiClient and closes it on exit."""
    api_client = await get_api_client()
    if api_client is None:
        raise ConfigurationError("Error getting cluster config: no in-cluster or kubeconfig configuration")
    try:
        yield api_client
    finally:
        await api_client.close()
