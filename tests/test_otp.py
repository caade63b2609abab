from __future__ import annotations

import dataclasses
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from carelink.auth import otp
from carelink.auth.otp import (
    MemoryOtpStore,
    OtpCheck,
    OtpEntry,
    consume_otp,
    create_otp_store,
    issue_otp,
)
from carelink.middleware.rate_limit import parse_rate
from carelink.services.exceptions import UnauthorizedError


def test_issue_and_consume():
    store = MemoryOtpStore()
    code = issue_otp(store, "91234567", user_id=7)

    assert consume_otp(store, "91234567", code) == 7
    assert store.get("91234567") is None


def test_reissue_replaces_previous_code(monkeypatch):
    monkeypatch.setattr(otp, "settings", dataclasses.replace(otp.settings, otp_fixed_code=""))
    store = MemoryOtpStore()
    store.put("91234567", OtpEntry(code="111111", user_id=1, expires_at=time.time() + 60))

    code = issue_otp(store, "91234567", user_id=1)
    assert len(code) == 6 and code.isdigit()
    assert store.get("91234567").code == code


def test_consume_unknown_phone():
    with pytest.raises(UnauthorizedError) as exc_info:
        consume_otp(MemoryOtpStore(), "80000000", "123456")
    assert exc_info.value.code == "OTP_NOT_FOUND"


def test_expiry_uses_ttl(monkeypatch):
    monkeypatch.setattr(otp, "settings", dataclasses.replace(otp.settings, otp_ttl_seconds=300))
    store = MemoryOtpStore()
    before = time.time()
    issue_otp(store, "91234567", user_id=3)

    entry = store.get("91234567")
    assert before + 299 <= entry.expires_at <= time.time() + 300
    assert not entry.expired()
    assert entry.expired(now=entry.expires_at + 1)


def test_unknown_backend_rejected():
    with pytest.raises(ValueError):
        create_otp_store("carrier-pigeon")


@pytest.mark.parametrize(
    ("rate", "expected"),
    [("60/minute", (60, 60)), ("10/second", (10, 1)), ("120/hour", (120, 3600))],
)
def test_parse_rate(rate, expected):
    assert parse_rate(rate) == expected


def test_parse_rate_rejects_garbage():
    with pytest.raises(ValueError):
        parse_rate("lots")


def test_mismatch_keeps_entry_and_expired_entry_is_dropped():
    store = MemoryOtpStore()
    store.put("91234567", OtpEntry(code="123456", user_id=4, expires_at=time.time() + 60))
    store.put("98765432", OtpEntry(code="123456", user_id=5, expires_at=time.time() - 1))

    result, _ = store.check_and_consume("91234567", "654321")
    assert result is OtpCheck.MISMATCH
    assert store.get("91234567") is not None

    result, _ = store.check_and_consume("98765432", "123456")
    assert result is OtpCheck.EXPIRED
    assert store.get("98765432") is None


def test_concurrent_consume_accepts_one_caller(monkeypatch):
    store = MemoryOtpStore()
    code = issue_otp(store, "91234567", user_id=9)

    check_entry = otp._check_entry

    def _slow(entry, submitted):
        time.sleep(0.05)
        return check_entry(entry, submitted)

    monkeypatch.setattr(otp, "_check_entry", _slow)

    workers = 4
    barrier = threading.Barrier(workers)

    def _consume(_):
        barrier.wait()
        try:
            return consume_otp(store, "91234567", code)
        except UnauthorizedError as exc:
            return exc.code

    with ThreadPoolExecutor(max_workers=workers) as executor:
        results = list(executor.map(_consume, range(workers)))

    assert results.count(9) == 1
    assert results.count("OTP_NOT_FOUND") == workers - 1
    assert store.get("91234567") is None
