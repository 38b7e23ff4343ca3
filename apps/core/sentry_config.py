"""
Sentry initialization and event scrubbing.

Checkout traffic carries customer names, e-mail addresses and phone numbers,
none of which may leave the store in an error report.
"""

import re
from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.django import DjangoIntegration
from sentry_sdk.integrations.redis import RedisIntegration

# Keys whose values are replaced wholesale
SENSITIVE_KEYS = {
    "password",
    "secret",
    "token",
    "refresh",
    "access",
    "authorization",
    "cookie",
    "csrf",
    "session",
    "api_key",
    "card_number",
    "cvv",
}

# Customer fields submitted at checkout and with feedback
CUSTOMER_KEYS = {
    "customer_name",
    "customer_email",
    "customer_phone",
}

CARD_PATTERN = re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b")
EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")


def scrub_sensitive_data(data: Any) -> Any:
    """
    Recursively scrub sensitive data from dictionaries, lists, and strings.
    """
    if isinstance(data, dict):
        return {key: _scrub_value(key, value) for key, value in data.items()}
    elif isinstance(data, list):
        return [scrub_sensitive_data(item) for item in data]
    elif isinstance(data, str):
        return _scrub_string(data)
    return data


def _scrub_value(key: Any, value: Any) -> Any:
    key_lower = str(key).lower()
    if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
        return "[REDACTED]"
    if key_lower == "customer_email" and isinstance(value, str):
        return mask_email(value)
    if key_lower in CUSTOMER_KEYS:
        return "[CUSTOMER]"
    return scrub_sensitive_data(value)


def _scrub_string(text: str) -> str:
    text = CARD_PATTERN.sub("XXXX-XXXX-XXXX-XXXX", text)
    text = EMAIL_PATTERN.sub(lambda m: mask_email(m.group(0)), text)
    # Keep the last 4 digits of phone numbers
    text = PHONE_PATTERN.sub(lambda m: f"XXX-XXX-{m.group(0)[-4:]}", text)
    return text


def mask_email(email: str) -> str:
    """
    Partially mask an email address.

    >>> mask_email("john@example.com")
    'jo***@example.com'
    """
    local, sep, domain = email.partition("@")
    if not sep or not local:
        return "REDACTED@EMAIL"
    return f"{local[:2]}***@{domain}"


def before_send(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Sentry before_send hook to scrub sensitive data from events.
    """
    request = event.get("request")
    if request:
        for part in ("headers", "query_string", "data"):
            if part in request:
                request[part] = scrub_sensitive_data(request[part])
        if "cookies" in request:
            request["cookies"] = {k: "[REDACTED]" for k in request["cookies"]}

    if "extra" in event:
        event["extra"] = scrub_sensitive_data(event["extra"])

    # Keep id and username, mask email and IP
    user = event.get("user")
    if user:
        if "email" in user:
            user["email"] = mask_email(user["email"])
        if "ip_address" in user:
            user["ip_address"] = "XXX.XXX.XXX.XXX"

    for exception in event.get("exception", {}).get("values", []):
        if "value" in exception:
            exception["value"] = _scrub_string(exception["value"])

    for breadcrumb in event.get("breadcrumbs", {}).get("values", []):
        if "data" in breadcrumb:
            breadcrumb["data"] = scrub_sensitive_data(breadcrumb["data"])
        if "message" in breadcrumb:
            breadcrumb["message"] = _scrub_string(breadcrumb["message"])

    return event


def initialize_sentry(
    dsn: Optional[str],
    environment: str = "development",
    traces_sample_rate: float = 0.1,
    release: Optional[str] = None,
) -> None:
    """
    Initialize Sentry SDK with Django, Celery, and Redis integrations.

    Args:
        dsn: Sentry DSN. If empty, Sentry is not initialized.
        environment: Environment name (development, production)
        traces_sample_rate: Fraction of requests to trace (0.0 to 1.0)
        release: Release version string
    """
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            DjangoIntegration(transaction_style="url"),
            CeleryIntegration(monitor_beat_tasks=True),
            RedisIntegration(),
        ],
        before_send=before_send,
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        max_request_body_size="medium",
    )
