"""Tests for the one-time password ledgers."""

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

from src.services.otp import (
    OTP_MAX,
    OTP_MIN,
    InMemoryOtpLedger,
    RedisOtpLedger,
    generate_code,
    get_otp_ledger,
)


class FakeClock:
    """Controllable clock for expiry tests."""

    def __init__(self):
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(clock):
    return InMemoryOtpLedger(ttl=timedelta(minutes=10), clock=clock)


class TestGenerateCode:
    def test_six_digit_numeric(self):
        for _ in range(200):
            code = generate_code()
            assert len(code) == 6
            assert OTP_MIN <= int(code) <= OTP_MAX


class TestInMemoryOtpLedger:
    """Tests for InMemoryOtpLedger."""

    def test_consume_once(self, ledger):
        code = ledger.issue("a@example.com")
        assert ledger.consume("a@example.com", code) is True
        assert ledger.consume("a@example.com", code) is False

    def test_wrong_code(self, ledger):
        code = ledger.issue("a@example.com")
        wrong = "100000" if code != "100000" else "100001"
        assert ledger.consume("a@example.com", wrong) is False
        # A failed attempt does not burn the code
        assert ledger.consume("a@example.com", code) is True

    def test_unknown_email(self, ledger):
        assert ledger.consume("nobody@example.com", "123456") is False

    def test_expired_code(self, ledger, clock):
        code = ledger.issue("a@example.com")
        clock.advance(minutes=10, seconds=1)
        assert ledger.consume("a@example.com", code) is False

    def test_code_valid_until_expiry(self, ledger, clock):
        code = ledger.issue("a@example.com")
        clock.advance(minutes=9, seconds=59)
        assert ledger.consume("a@example.com", code) is True

    def test_reissue_overwrites(self, ledger):
        with patch("src.services.otp.generate_code", side_effect=["111111", "222222"]):
            first = ledger.issue("a@example.com")
            second = ledger.issue("a@example.com")
        assert ledger.consume("a@example.com", first) is False
        assert ledger.consume("a@example.com", second) is True

    def test_emails_are_isolated(self, ledger):
        with patch("src.services.otp.generate_code", side_effect=["111111", "222222"]):
            a_code = ledger.issue("a@example.com")
            b_code = ledger.issue("b@example.com")
        assert ledger.consume("a@example.com", b_code) is False
        assert ledger.consume("b@example.com", b_code) is True
        assert ledger.consume("a@example.com", a_code) is True


    def test_lock_count_stays_fixed(self, ledger):
        for i in range(5000):
            assert ledger.consume(f"nobody{i}@example.com", "123456") is False
        assert len(ledger._locks) == InMemoryOtpLedger.lock_stripes
        assert ledger._records == {}

    def test_expired_records_purged_on_issue(self, ledger, clock):
        for i in range(100):
            ledger.issue(f"user{i}@example.com")
        clock.advance(minutes=11)
        code = ledger.issue("fresh@example.com")
        assert list(ledger._records) == ["fresh@example.com"]
        assert ledger.consume("fresh@example.com", code) is True


class TestRedisOtpLedger:
    """Tests for RedisOtpLedger against a mocked client."""

    def test_issue_sets_key_with_ttl(self):
        client = MagicMock()
        ledger = RedisOtpLedger(client, ttl=timedelta(minutes=10))

        code = ledger.issue("a@example.com")

        client.set.assert_called_once_with("otp:a@example.com", code, ex=600)

    def test_consume_runs_compare_and_delete(self):
        client = MagicMock()
        script = MagicMock(return_value=1)
        client.register_script.return_value = script
        ledger = RedisOtpLedger(client, ttl=timedelta(minutes=10))

        assert ledger.consume("a@example.com", "123456") is True
        script.assert_called_once_with(keys=["otp:a@example.com"], args=["123456"])

    def test_consume_mismatch(self):
        client = MagicMock()
        client.register_script.return_value = MagicMock(return_value=0)
        ledger = RedisOtpLedger(client, ttl=timedelta(minutes=10))

        assert ledger.consume("a@example.com", "123456") is False


def test_get_otp_ledger_builds_one_instance(monkeypatch):
    monkeypatch.setattr("src.services.otp._ledger", None)
    with ThreadPoolExecutor(max_workers=8) as pool:
        ledgers = list(pool.map(lambda _: get_otp_ledger(), range(32)))
    assert len({id(ledger) for ledger in ledgers}) == 1
