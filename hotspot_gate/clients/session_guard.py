from __future__ import annotations

import asyncio
import contextlib
from typing import Callable, MutableMapping

import httpx
from pydantic import BaseModel

from hotspot_gate.config import Settings
from hotspot_gate.core.logging import get_logger, token_prefix
from hotspot_gate.schemas.enums import BindingMode, GuardState

logger = get_logger(__name__)

NO_CREDENTIALS_MESSAGE = "Please connect to hotspot"
EXPIRED_MESSAGE = "Session expired. Please reconnect."
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
BAD_RESPONSE_MESSAGE = "Unexpected response from server. Please reconnect."

_TOKEN_KEYS = ("token", "ts", "u", "exp")
_ACCESS_KEY = "accessKey"

StateListener = Callable[[GuardState, str | None], None]


class GuardCredentials(BaseModel):
    token: str | None = None
    ts: str | None = None
    u: str | None = None
    exp: str | None = None
    access_key: str | None = None

    def is_complete(self, mode: BindingMode) -> bool:
        if mode is BindingMode.KEY_ONLY:
            return bool(self.access_key)
        return bool(self.token and self.ts)

    def query_params(self, mode: BindingMode) -> dict[str, str]:
        if mode is BindingMode.KEY_ONLY:
            return {"key": self.access_key or ""}
        params = {"token": self.token, "ts": self.ts, "u": self.u, "exp": self.exp}
        return {k: v for k, v in params.items() if v is not None}


class SessionGuard:
    """Client-side session state machine.

    Holds the credentials handed over by the issuer redirect, re-validates them
    on a timer, whenever the page becomes visible again and when the network
    changes. It keeps the app locked whenever the last cycle failed. Failure is
    sticky: only a successful cycle unlocks.

    ``storage`` plays the role of browser session storage; it lives as long as
    the guard's owner keeps it and is never written anywhere durable.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        validate_url: str,
        page_url: str,
        storage: MutableMapping[str, str] | None = None,
        mode: BindingMode = BindingMode.IP_AND_IDENTITY,
        interval_seconds: float = 300.0,
        timeout_seconds: float = 10.0,
        on_change: StateListener | None = None,
    ) -> None:
        self._client = client
        self._validate_url = validate_url
        self._storage: MutableMapping[str, str] = storage if storage is not None else {}
        self._mode = mode
        self._interval = interval_seconds
        self._timeout = timeout_seconds
        self._on_change = on_change

        self.page_url = page_url
        self.state = GuardState.UNINITIALIZED
        self.lock_message: str | None = None
        self.credentials: GuardCredentials | None = None
        self.validating = False
        self._task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(
        cls,
        client: httpx.AsyncClient,
        settings: Settings,
        validate_url: str,
        page_url: str,
        storage: MutableMapping[str, str] | None = None,
        on_change: StateListener | None = None,
    ) -> SessionGuard:
        return cls(
            client=client,
            validate_url=validate_url,
            page_url=page_url,
            storage=storage,
            mode=settings.BINDING_MODE,
            interval_seconds=settings.GUARD_INTERVAL_SECONDS,
            timeout_seconds=settings.GUARD_TIMEOUT_SECONDS,
            on_change=on_change,
        )

    @property
    def locked(self) -> bool:
        return self.state in (GuardState.SILENT_LOCKED, GuardState.LOCKED_WITH_RETRY)

    @property
    def show_retry(self) -> bool:
        return self.state is GuardState.LOCKED_WITH_RETRY

    def initialize(self) -> GuardState:
        """Pick up credentials from the page URL, falling back to storage."""
        from_url = self._read_url_credentials()
        if from_url is not None:
            self.credentials = from_url
            self._persist(from_url)
            self.page_url = self._strip_credentials(self.page_url)
            logger.info("guard_credentials_from_url", token=token_prefix(from_url.token))
        else:
            self.credentials = self._read_stored_credentials()

        if self.credentials is None:
            self._transition(GuardState.SILENT_LOCKED, NO_CREDENTIALS_MESSAGE)
        return self.state

    async def validate_access(self) -> GuardState:
        """Run one validation cycle; overlapping calls are dropped, not queued."""
        if self.validating or self.state is GuardState.SILENT_LOCKED:
            return self.state
        if self.state is GuardState.UNINITIALIZED:
            self.initialize()
            if self.state is GuardState.SILENT_LOCKED:
                return self.state

        self.validating = True
        try:
            resp = await self._client.get(
                self._validate_url,
                params=self.credentials.query_params(self._mode),
                headers={"Cache-Control": "no-store"},
                timeout=self._timeout,
            )
            data = resp.json()
        except httpx.HTTPError as exc:
            logger.warning("guard_validation_transport_error", error=str(exc) or repr(exc))
            self._transition(GuardState.LOCKED_WITH_RETRY, NETWORK_ERROR_MESSAGE)
        except ValueError:
            logger.warning("guard_validation_bad_response")
            self._transition(GuardState.LOCKED_WITH_RETRY, BAD_RESPONSE_MESSAGE)
        else:
            self._apply_result(resp, data)
        finally:
            self.validating = False
        return self.state

    async def on_visibility_change(self, hidden: bool) -> GuardState:
        if hidden:
            return self.state
        return await self.validate_access()

    async def on_network_change(self) -> GuardState:
        """The device switched networks; an IP-bound token may no longer hold."""
        return await self.validate_access()

    async def reconnect(self) -> GuardState:
        """Retry affordance shown on a soft lock."""
        return await self.validate_access()

    def start(self, validate_now: bool = True) -> None:
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.create_task(self._run(validate_now))

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _run(self, validate_now: bool) -> None:
        if validate_now:
            await self.validate_access()
        while True:
            await asyncio.sleep(self._interval)
            await self.validate_access()

    def _apply_result(self, resp: httpx.Response, data: object) -> None:
        if resp.is_error or not isinstance(data, dict) or data.get("ok") is not True:
            reason = data.get("reason") if isinstance(data, dict) else None
            logger.info("guard_validation_rejected", status=resp.status_code, reason=reason)
            message = f"{reason}. Please reconnect." if reason else EXPIRED_MESSAGE
            self._transition(GuardState.LOCKED_WITH_RETRY, message)
            return

        if data.get("token") and data.get("ts") and self.credentials is not None:
            self.credentials = self.credentials.model_copy(
                update={"token": str(data["token"]), "ts": str(data["ts"])}
            )
            self._persist(self.credentials)
            logger.info("guard_token_rotated", token=token_prefix(self.credentials.token))
        self._transition(GuardState.UNLOCKED, None)

    def _transition(self, state: GuardState, message: str | None) -> None:
        previous = self.state
        self.state = state
        self.lock_message = message
        if previous is not state:
            logger.info("guard_state_changed", previous=previous.value, state=state.value)
        if self._on_change is not None:
            self._on_change(state, message)

    def _read_url_credentials(self) -> GuardCredentials | None:
        params = httpx.URL(self.page_url).params
        if self._mode is BindingMode.KEY_ONLY:
            key = params.get("key")
            return GuardCredentials(access_key=key) if key else None
        creds = GuardCredentials(**{k: params.get(k) for k in _TOKEN_KEYS})
        return creds if creds.is_complete(self._mode) else None

    def _read_stored_credentials(self) -> GuardCredentials | None:
        if self._mode is BindingMode.KEY_ONLY:
            creds = GuardCredentials(access_key=self._storage.get(_ACCESS_KEY))
        else:
            creds = GuardCredentials(**{k: self._storage.get(k) for k in _TOKEN_KEYS})
        return creds if creds.is_complete(self._mode) else None

    def _persist(self, creds: GuardCredentials) -> None:
        if self._mode is BindingMode.KEY_ONLY:
            self._storage[_ACCESS_KEY] = creds.access_key or ""
            return
        for key in _TOKEN_KEYS:
            value = getattr(creds, key)
            if value is not None:
                self._storage[key] = value

    def _strip_credentials(self, url: str) -> str:
        stripped = httpx.URL(url)
        keys = ("key",) if self._mode is BindingMode.KEY_ONLY else _TOKEN_KEYS
        for key in keys:
            stripped = stripped.copy_remove_param(key)
        return str(stripped)
