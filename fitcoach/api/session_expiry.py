"""401 handling: clear the token, alert the user, route to login."""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from fitcoach.storage.session_store import SessionStore

LOGIN_ROUTE = "login"
SESSION_EXPIRED_TITLE = "Session Expired"
SESSION_EXPIRED_MESSAGE = "Please log in again."


class AlertPresenter(Protocol):
    def show_alert(self, title: str, message: str) -> None: ...


class Navigator(Protocol):
    def navigate(self, route: str) -> None: ...


class LoggingAlertPresenter:
    """Default presenter when no UI is attached."""

    def show_alert(self, title: str, message: str) -> None:
        logger.warning(f"[ALERT] {title}: {message}")


class NullNavigator:
    def navigate(self, route: str) -> None:
        logger.info(f"[NAVIGATION] No navigator attached, dropping route={route}")


class SessionExpiryHandler:
    def __init__(
        self,
        session_store: SessionStore,
        alerts: AlertPresenter | None = None,
        navigator: Navigator | None = None,
    ):
        self._session_store = session_store
        self._alerts = alerts or LoggingAlertPresenter()
        self._navigator = navigator or NullNavigator()

    async def handle(self) -> None:
        await self._session_store.clear_token()
        logger.warning("[SESSION] Session expired (401), token cleared")
        self._alerts.show_alert(SESSION_EXPIRED_TITLE, SESSION_EXPIRED_MESSAGE)
        self._navigator.navigate(LOGIN_ROUTE)
