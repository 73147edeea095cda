"""
Configuration management for the Event Planning Service.
Values are resolved from the environment first, then from Zero secrets.
"""

import os
import asyncio
import concurrent.futures
from urllib.parse import quote_plus
from typing import Dict, Any, Optional, List
import logging

from dotenv import load_dotenv
from zero_python_sdk import zero

logger = logging.getLogger(__name__)

load_dotenv()


class ZeroSecretsManager:
    """
    Zero secrets client using the official Zero Python SDK.
    Secrets are fetched once and cached for the lifetime of the process.
    """

    def __init__(self, zero_token: str, caller_name: str = "eventplanning"):
        self.zero_token = zero_token
        self.caller_name = caller_name
        self._cache: Dict[str, Any] = {}
        self._secrets = None

    async def _fetch_secrets(self):
        """Fetch secrets from Zero if not already cached."""
        if self._secrets is None:
            try:
                loop = asyncio.get_running_loop()
                with concurrent.futures.ThreadPoolExecutor() as executor:
                    self._secrets = await loop.run_in_executor(
                        executor,
                        lambda: zero(
                            token=self.zero_token,
                            pick=["eventplanning"],
                            caller_name=self.caller_name
                        ).fetch()
                    )
                logger.info("Successfully fetched secrets from Zero")
            except Exception as e:
                logger.error(f"Failed to fetch secrets from Zero: {e}")
                self._secrets = {}

    def _normalize_key(self, key: str) -> str:
        """Normalize a key to lowercase and replace underscores with hyphens."""
        return key.lower().replace("_", "-")

    async def get_secret(self, key: str) -> Optional[str]:
        """
        Get a secret value by key.

        Args:
            key: The secret key to retrieve

        Returns:
            Secret value or None if not found
        """
        key = self._normalize_key(key)
        if key in self._cache:
            return self._cache[key]

        await self._fetch_secrets()
        secret_value = self._secrets.get("eventplanning", {}).get(key)

        if secret_value:
            self._cache[key] = secret_value

        return secret_value


class EventPlanningConfig:
    """
    Event Planning Service configuration manager.
    Environment variables win; Zero is consulted only when ZERO_TOKEN is set.
    """

    def __init__(self):
        self.zero_token = os.getenv("ZERO_TOKEN")
        self.secrets_manager = ZeroSecretsManager(self.zero_token) if self.zero_token else None

    async def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Resolve a configuration value by key."""
        value = os.getenv(key)
        if value is not None and value != "":
            return value

        if self.secrets_manager:
            value = await self.secrets_manager.get_secret(key)
            if value:
                return value

        return default

    async def get_database_url(self) -> str:
        """Get the database connection URL."""
        url = await self.get_value("DATABASE_URL")
        if url:
            return url

        host = await self.get_value("DB_HOST", "localhost")
        port = await self.get_value("DB_PORT", "5432")
        name = await self.get_value("DB_NAME", "eventplanning")
        user = await self.get_value("DB_USER", "eventplanning")
        password = await self.get_value("DB_PASSWORD", "eventplanning")

        return f"postgresql+psycopg://{user}:{quote_plus(password)}@{host}:{port}/{name}"

    async def get_database_config(self) -> Dict[str, int]:
        """Get connection pool settings."""
        return {
            "pool_size": int(await self.get_value("DB_POOL_SIZE", "10")),
            "max_overflow": int(await self.get_value("DB_MAX_OVERFLOW", "20")),
            "pool_timeout": int(await self.get_value("DB_POOL_TIMEOUT", "30")),
            "pool_recycle": int(await self.get_value("DB_POOL_RECYCLE", "3600")),
        }

    async def get_redis_url(self) -> str:
        """Get the Redis URL used as the Celery broker."""
        return await self.get_value("REDIS_URL", "redis://localhost:6379/0")

    async def get_jwt_secret(self) -> str:
        """Get JWT secret key."""
        return await self.get_value("JWT_SECRET", "your-secret-key-change-in-production")

    async def get_jwt_algorithm(self) -> str:
        """Get JWT algorithm."""
        return await self.get_value("JWT_ALGORITHM", "HS256")

    async def get_jwt_expiry_minutes(self) -> int:
        """Get JWT expiry time in minutes."""
        return int(await self.get_value("JWT_EXPIRY_MINUTES", "1440"))

    async def get_password_reset_expiry_minutes(self) -> int:
        """Get the lifetime of a password reset token."""
        return int(await self.get_value("PASSWORD_RESET_EXPIRY_MINUTES", "15"))

    async def get_password_reset_return_token(self) -> bool:
        """Whether forgot-password responses carry the issued token (local development only)."""
        return (await self.get_value("PASSWORD_RESET_RETURN_TOKEN", "false")).lower() == "true"

    async def get_slip_upload_dir(self) -> str:
        """Get the directory where payment slips are stored."""
        return await self.get_value("SLIP_UPLOAD_DIR", "uploads/slips")

    async def get_slip_max_bytes(self) -> int:
        """Get the largest accepted payment slip, in bytes."""
        return int(await self.get_value("SLIP_MAX_BYTES", str(5 * 1024 * 1024)))

    def get_cors_origins(self) -> List[str]:
        """Get CORS allowed origins (read synchronously, when the app is built)."""
        origins = os.getenv("CORS_ORIGINS")
        if origins:
            return [origin.strip() for origin in origins.split(",")]
        return ["http://localhost:3000", "http://localhost:5173"]

    async def get_notification_config(self) -> Dict[str, Any]:
        """Get notification dispatch settings."""
        return {
            "enable_email_notifications": (await self.get_value("ENABLE_EMAIL_NOTIFICATIONS", "false")).lower() == "true",
            "email_queue": await self.get_value("EMAIL_QUEUE", "email_notifications"),
            "latest_limit": int(await self.get_value("NOTIFICATION_LATEST_LIMIT", "20")),
        }

    async def get_admin_bootstrap(self) -> Optional[Dict[str, str]]:
        """Get credentials of the admin account ensured at startup, if configured."""
        username = await self.get_value("ADMIN_USERNAME")
        email = await self.get_value("ADMIN_EMAIL")
        password = await self.get_value("ADMIN_PASSWORD")
        if not (username and email and password):
            return None
        return {"username": username, "email": email, "password": password}

    def get_log_level(self) -> str:
        """Get the log level (read synchronously, before the event loop starts)."""
        return os.getenv("LOG_LEVEL", "INFO")


# Global config instance
config = EventPlanningConfig()
