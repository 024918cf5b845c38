"""Backend API client: results, retry policy, diagnostics and 401 handling."""

from fitcoach.api.client import ApiClient
from fitcoach.api.diagnostics import ApiErrorRecord, DiagnosticLog
from fitcoach.api.env import ApiBaseUrlInfo, normalize_base_url, resolve_api_base_url
from fitcoach.api.results import ApiFailure, ApiResult, ApiSuccess
from fitcoach.api.retry import RetryDecision, RetryPolicy, RetryState
from fitcoach.api.session_expiry import LOGIN_ROUTE, AlertPresenter, Navigator, SessionExpiryHandler

__all__ = [
    "LOGIN_ROUTE",
    "AlertPresenter",
    "ApiBaseUrlInfo",
    "ApiClient",
    "ApiErrorRecord",
    "ApiFailure",
    "ApiResult",
    "ApiSuccess",
    "DiagnosticLog",
    "Navigator",
    "RetryDecision",
    "RetryPolicy",
    "RetryState",
    "SessionExpiryHandler",
    "normalize_base_url",
    "resolve_api_base_url",
]
