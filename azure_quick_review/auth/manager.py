"""Authentication manager for Azure services"""

import asyncio
import os
from typing import Dict, Optional

from azure.core.exceptions import ClientAuthenticationError
from azure.identity import AzureCliCredential, DefaultAzureCredential, EnvironmentCredential
from azure.mgmt.subscription import SubscriptionClient

from ..core.errors import ConfigurationError
from ..utils.logger import setup_logger

ENVIRONMENT_VARIABLES = ('AZURE_TENANT_ID', 'AZURE_CLIENT_ID', 'AZURE_CLIENT_SECRET')


class AuthenticationManager:
    """Resolves a credential and the subscriptions it can reach"""

    def __init__(self, credential=None):
        self.logger = setup_logger(self.__class__.__name__)
        self.credential = credential
        self._subscription_cache: Dict[str, str] = {}

    def get_credential(self):
        """Return a working credential: environment, then Azure CLI, then the default chain"""

        if self.credential:
            return self.credential

        candidates = []
        if all(os.getenv(var) for var in ENVIRONMENT_VARIABLES):
            candidates.append(("environment variables", EnvironmentCredential))
        candidates.append(("Azure CLI", AzureCliCredential))
        candidates.append(("default credential chain", DefaultAzureCredential))

        for label, credential_type in candidates:
            try:
                credential = credential_type()
                list(SubscriptionClient(credential).subscriptions.list())
            except ClientAuthenticationError as e:
                self.logger.debug(f"{label} authentication failed: {e}")
                continue
            self.credential = credential
            self.logger.info(f"Authenticated using {label}")
            return credential

        raise ConfigurationError("Unable to authenticate with Azure. Run 'az login' or set AZURE_* variables")

    async def get_accessible_subscriptions(self) -> Dict[str, str]:
        """Return enabled subscriptions as id -> display name"""

        if self._subscription_cache:
            return dict(self._subscription_cache)

        loop = asyncio.get_running_loop()
        credential = await loop.run_in_executor(None, self.get_credential)
        subscription_client = SubscriptionClient(credential)
        listed = await loop.run_in_executor(None, lambda: list(subscription_client.subscriptions.list()))

        subscriptions = {}
        for sub in listed:
            state = getattr(sub.state, "value", sub.state)
            if state == 'Enabled':
                subscriptions[sub.subscription_id] = sub.display_name
                self.logger.debug(f"Found subscription: {sub.display_name} ({sub.subscription_id})")

        self._subscription_cache.update(subscriptions)
        self.logger.info(f"Found {len(subscriptions)} enabled subscriptions")
        return subscriptions

    def get_subscription_name(self, subscription_id: str) -> Optional[str]:
        return self._subscription_cache.get(subscription_id)
