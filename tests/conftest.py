"""Shared test fixtures for the SendCloud SMS client tests."""

import json
from unittest.mock import AsyncMock

import pytest

_SETTINGS_ENV = (
    "SENDCLOUD_SMS_USER",
    "SENDCLOUD_SMS_KEY",
    "SMS_COUNTRY",
    "SMS_TEMPLATES",
    "SMS_ENDPOINT",
    "SMS_MSG_TYPE_SOURCE",
    "SMS_SIGNATURE_SCHEME",
    "SMS_TIMEOUT_SECONDS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch):
    """Keep the host environment from leaking into Settings()."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _clear_singleton_caches():
    """Reset the cached Settings between tests."""
    yield
    from sendcloud_sms.config import get_settings

    get_settings.cache_clear()


@pytest.fixture
def templates():
    """Registry with domestic (CN) and Hong Kong templates of both kinds."""
    from sendcloud_sms.templates import Template, TemplateKind, TemplateRegistry

    return TemplateRegistry.build(
        [
            Template(template_id="100", kind=TemplateKind.DEFAULT, country="CN"),
            Template(template_id="101", kind=TemplateKind.CODE, country="CN"),
            Template(
                template_id="200",
                kind=TemplateKind.DEFAULT,
                country="HK",
                end_point="https://sms.example.test/send",
            ),
            Template(template_id="201", kind=TemplateKind.CODE, country="HK"),
        ]
    )


def make_transport(body=None, status_code=200):
    """AsyncMock transport answering every POST with *body* (dict or bytes)."""
    from sendcloud_sms.transport import TransportResponse

    if body is None:
        body = {"result": True, "statusCode": 200, "message": "OK"}
    content = body if isinstance(body, bytes) else json.dumps(body).encode()

    transport = AsyncMock()
    transport.post = AsyncMock(return_value=TransportResponse(status_code, content))
    transport.close = AsyncMock()
    return transport


@pytest.fixture
def transport_factory():
    """Factory fixture: ``transport_factory(body, status_code)``."""
    return make_transport


@pytest.fixture
def mock_transport():
    return make_transport()


@pytest.fixture
def client(templates, mock_transport):
    """Client for account ``api_user`` with domestic country CN."""
    from sendcloud_sms.client import SMSClient

    return SMSClient(
        "api_user",
        "secret-key",
        "CN",
        templates=templates,
        transport=mock_transport,
    )
