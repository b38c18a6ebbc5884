"""Redis implementation of the fingerprint store."""

from __future__ import annotations

import logging

import redis
from redis.exceptions import RedisError

from doc_indexer.config import settings
from doc_indexer.exceptions import ChangeDetectionError
from doc_indexer.stores.base import FingerprintStore

logger = logging.getLogger(__name__)


class RedisFingerprintStore(FingerprintStore):
    """Fingerprints kept as plain string values in Redis.

    Parameters
    ----------
    client:
        An existing ``redis.Redis`` client.  When *None*, one is created
        from *host* / *port* / *db* / *password*.
    prefix:
        Key namespace (``<prefix>:<document id>``).
    """

    def __init__(
        self,
        client: redis.Redis | None = None,
        *,
        prefix: str = settings.fingerprint_key_prefix,
        host: str = settings.redis_host,
        port: int = settings.redis_port,
        db: int = settings.redis_db,
        password: str | None = settings.redis_password,
    ) -> None:
        super().__init__(prefix)
        if client is None:
            client = redis.Redis(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
        self._client = client

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(key)
        except RedisError as exc:
            raise ChangeDetectionError(f"fingerprint lookup failed for {key!r}: {exc}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self._client.set(key, value)
        except RedisError as exc:
            raise ChangeDetectionError(f"fingerprint write failed for {key!r}: {exc}") from exc

    def health_check(self) -> bool:
        try:
            return bool(self._client.ping())
        except RedisError:
            logger.warning("Redis health-check failed", exc_info=True)
            return False
