import json
import boto3
import os
import time
from functools import wraps
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

class SecretsManager:
    """
    Retrieves database credentials from AWS Secrets Manager.

    Values are cached for a short TTL so rotated credentials are picked up
    without a restart.
    """

    def __init__(self, region_name: str = None, cache_ttl: int = 300):
        self.region_name = region_name or os.environ.get('AWS_REGION', 'us-east-1')
        self._client = None
        self._cache = {}
        self._cache_timestamps = {}
        self._cache_ttl = cache_ttl

    @property
    def client(self):
        """Lazy-loaded Secrets Manager client"""
        if self._client is None:
            session = boto3.session.Session()
            self._client = session.client(
                service_name='secretsmanager',
                region_name=self.region_name
            )
        return self._client

    def _time_based_cache(self, func):
        @wraps(func)
        def wrapper(secret_id: str) -> str:
            current_time = time.time()
            cache_key = f"{func.__name__}:{secret_id}"

            if (cache_key in self._cache and
                    current_time - self._cache_timestamps.get(cache_key, 0) < self._cache_ttl):
                logger.debug("Returning cached secret for %s", secret_id)
                return self._cache[cache_key]

            logger.info("Fetching fresh secret for %s", secret_id)
            try:
                result = func(secret_id)
            except Exception as e:
                # A stale value beats no value while the secret is rotating
                if cache_key in self._cache:
                    logger.warning("Fresh secret fetch failed for %s, using stale cache: %s", secret_id, e)
                    return self._cache[cache_key]
                raise
            self._cache[cache_key] = result
            self._cache_timestamps[cache_key] = current_time
            return result
        return wrapper

    def clear_cache(self):
        """Clear the secrets cache to force fresh retrieval."""
        logger.info("Clearing secrets cache")
        self._cache.clear()
        self._cache_timestamps.clear()

    def get_secret(self, secret_id: str) -> str:
        """
        Get a secret value from Secrets Manager with TTL-based caching.

        Args:
            secret_id: The secret ID or ARN

        Returns:
            The secret value as a string
        """
        @self._time_based_cache
        def _fetch_secret(secret_id: str) -> str:
            try:
                response = self.client.get_secret_value(SecretId=secret_id)
            except Exception as e:
                logger.error("Failed to get secret %s: %s", secret_id, e)
                raise
            if 'SecretBinary' in response:
                return response['SecretBinary']
            return response['SecretString']

        return _fetch_secret(secret_id)

    def get_json_secret(self, secret_id: str) -> Dict[str, Any]:
        return json.loads(self.get_secret(secret_id))

    def get_db_credentials(self) -> Dict[str, str]:
        """
        Get PostgreSQL database credentials. RDS-managed secrets carry
        username, password, host, port and dbname.
        """
        return self.get_json_secret(os.environ.get('DATABASE_SECRETS_NAME', 'relations-api/db'))
