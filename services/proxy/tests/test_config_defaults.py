"""
Where: services/proxy/tests/test_config_defaults.py
What: Validate ProxyConfig loading and defaults.
Why: A missing backend must stop startup, and defaults must stay stable.
"""

import pytest
from pydantic import ValidationError

from services.proxy.config import ProxyConfig, load_config


def test_backend_is_required(monkeypatch):
    monkeypatch.delenv("BACKEND", raising=False)

    with pytest.raises(ValidationError):
        ProxyConfig(_env_file=None)


def test_backend_must_be_http_url(monkeypatch):
    monkeypatch.setenv("BACKEND", "not a url")

    with pytest.raises(ValidationError):
        ProxyConfig(_env_file=None)


def test_load_config_fails_fast(monkeypatch, capsys):
    monkeypatch.delenv("BACKEND", raising=False)
    monkeypatch.chdir("/")

    with pytest.raises(ValidationError):
        load_config()

    assert "Failed to load configuration" in capsys.readouterr().err


def test_defaults(monkeypatch):
    monkeypatch.setenv("BACKEND", "http://backend:9000/invoke")

    config = ProxyConfig(_env_file=None)

    assert config.backend_url == "http://backend:9000/invoke"
    assert config.BACKEND_TIMEOUT == 30.0
    assert config.VERIFY_SSL is True
    assert config.bind_host == "0.0.0.0"
    assert config.bind_port == 8000
    assert config.EVENT_ACCOUNT_ID == "anonymous"


def test_config_is_immutable(monkeypatch):
    monkeypatch.setenv("BACKEND", "http://backend:9000/invoke")
    config = ProxyConfig(_env_file=None)

    with pytest.raises(ValidationError):
        config.BACKEND_TIMEOUT = 1.0


def test_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("BACKEND", "http://backend:9000/invoke")
    monkeypatch.setenv("BACKEND_TIMEOUT", "0")

    with pytest.raises(ValidationError):
        ProxyConfig(_env_file=None)


@pytest.mark.parametrize(
    "url",
    ["http://backend:9000", "https://backend.example.com/2015-03-31/functions/f/invocations"],
)
def test_backend_url_is_kept_verbatim(monkeypatch, url):
    monkeypatch.setenv("BACKEND", url)

    assert ProxyConfig(_env_file=None).backend_url == url


def test_backend_must_be_http_scheme(monkeypatch):
    monkeypatch.setenv("BACKEND", "ftp://backend:21/invoke")

    with pytest.raises(ValidationError):
        ProxyConfig(_env_file=None)
