from __future__ import annotations

import httpx
import pytest

from hotspot_gate.utils.retry import with_retry


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_retries_transport_errors(self):
        attempts = 0

        @with_retry(max_retries=3, backoff_factor=0)
        async def fetch() -> str:
            nonlocal attempts
            attempts += 1
            if attempts < 3:
                raise httpx.ConnectError("refused")
            return "ok"

        assert await fetch() == "ok"
        assert attempts == 3

    @pytest.mark.asyncio
    async def test_gives_up_and_reraises(self):
        attempts = 0

        @with_retry(max_retries=2, backoff_factor=0)
        async def fetch() -> None:
            nonlocal attempts
            attempts += 1
            raise httpx.ReadTimeout("slow")

        with pytest.raises(httpx.ReadTimeout):
            await fetch()
        assert attempts == 2

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self):
        attempts = 0

        @with_retry(max_retries=3, backoff_factor=0)
        async def fetch() -> None:
            nonlocal attempts
            attempts += 1
            raise ValueError("bad body")

        with pytest.raises(ValueError):
            await fetch()
        assert attempts == 1
