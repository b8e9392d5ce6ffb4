import logging

import httpx

from .config import BaseAppConfig

logger = logging.getLogger(__name__)


class HttpClientFactory:
    """
    Builds the per-run HTTP client with the configured SSL and pool settings.
    """

    def __init__(self, config: BaseAppConfig):
        self.config = config

    def create_async_client(self, **kwargs) -> httpx.AsyncClient:
        """
        Create an httpx.AsyncClient.

        Args:
            **kwargs: Additional arguments for httpx.AsyncClient; ``verify`` and
                ``limits`` fall back to the config values when omitted.
        """
        verify = kwargs.pop("verify", None)
        if verify is None:
            verify = self.config.VERIFY_SSL
        if not verify:
            logger.warning("SSL certificate verification is disabled (VERIFY_SSL=False)")

        if "limits" not in kwargs:
            kwargs["limits"] = httpx.Limits(
                max_keepalive_connections=self.config.HTTP_MAX_KEEPALIVE,
                max_connections=self.config.HTTP_MAX_CONNECTIONS,
            )
        # Runtime containers may carry proxy variables meant for other tools.
        kwargs.setdefault("trust_env", False)

        return httpx.AsyncClient(verify=verify, **kwargs)
