"""One-time password ledger for password resets.

Codes are keyed by email, single-use and expire after
``settings.otp_expiration_minutes``. Two backends share the same
``issue``/``consume`` contract: an in-process map for single-worker
deployments and tests, and Redis when several workers must see the
same codes.
"""

import logging
import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

import redis

from src.config import get_settings

logger = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999


def generate_code() -> str:
    """Return a random six-digit numeric code."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


class OtpLedger(Protocol):
    """Storage contract for reset codes."""

    def issue(self, email: str) -> str: ...

    def consume(self, email: str, code: str) -> bool: ...


@dataclass
class OtpRecord:
    code: str
    expires_at: datetime


class InMemoryOtpLedger:
    """Expiring in-process map guarded by a fixed set of striped locks.

    An email always hashes to the same stripe, so operations on one address
    are serialized while unrelated addresses rarely contend. Expired records
    are dropped whenever a new code is issued.
    """

    lock_stripes = 64

    def __init__(
        self,
        ttl: timedelta,
        clock: Callable[[], datetime] | None = None,
    ):
        self.ttl = ttl
        self._clock = clock or (lambda: datetime.now(UTC))
        self._records: dict[str, OtpRecord] = {}
        self._locks = [threading.Lock() for _ in range(self.lock_stripes)]

    def _lock_for(self, email: str) -> threading.Lock:
        return self._locks[hash(email) % self.lock_stripes]

    def _purge_expired(self) -> None:
        now = self._clock()
        for email, record in list(self._records.items()):
            if now < record.expires_at:
                continue
            with self._lock_for(email):
                current = self._records.get(email)
                if current is not None and now >= current.expires_at:
                    del self._records[email]

    def issue(self, email: str) -> str:
        self._purge_expired()
        code = generate_code()
        with self._lock_for(email):
            self._records[email] = OtpRecord(code=code, expires_at=self._clock() + self.ttl)
        return code

    def consume(self, email: str, code: str) -> bool:
        with self._lock_for(email):
            record = self._records.get(email)
            if record is None or record.code != code or self._clock() >= record.expires_at:
                return False
            del self._records[email]
            return True


# Compare-and-delete in one round trip so a code can be used only once.
_CONSUME_SCRIPT = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


class RedisOtpLedger:
    """Redis-backed ledger; expiry is delegated to key TTLs."""

    key_prefix = "otp:"

    def __init__(self, client: redis.Redis, ttl: timedelta):
        self.client = client
        self.ttl = ttl
        self._consume = client.register_script(_CONSUME_SCRIPT)

    def _key(self, email: str) -> str:
        return f"{self.key_prefix}{email}"

    def issue(self, email: str) -> str:
        code = generate_code()
        self.client.set(self._key(email), code, ex=int(self.ttl.total_seconds()))
        return code

    def consume(self, email: str, code: str) -> bool:
        return bool(self._consume(keys=[self._key(email)], args=[code]))


_ledger: OtpLedger | None = None
_ledger_lock = threading.Lock()


def get_otp_ledger() -> OtpLedger:
    """Get the process-wide ledger for the configured backend."""
    global _ledger
    if _ledger is not None:
        return _ledger
    with _ledger_lock:
        if _ledger is None:
            settings = get_settings()
            ttl = timedelta(minutes=settings.otp_expiration_minutes)
            if settings.otp_backend == "redis":
                client = redis.from_url(settings.redis_url, decode_responses=True)
                _ledger = RedisOtpLedger(client, ttl)
            else:
                _ledger = InMemoryOtpLedger(ttl)
            logger.info(f"Using {settings.otp_backend} OTP ledger")
    return _ledger
