from petitions_cli import config
from petitions_cli.http import make_client
from petitions_client import LoggingVerifier


def test_make_client_passes_app_config(monkeypatch) -> None:
    captured = {}

    class _FakeClient:
        def __init__(self, client_cfg, *, verifier):
            captured["cfg"] = client_cfg
            captured["verifier"] = verifier

    monkeypatch.setattr("petitions_cli.http.PetitionsClient", _FakeClient)
    cfg = config.AppConfig(host="https://api.example.test", api_key="K", allow_insecure_tls=True)

    make_client(cfg, host_override=None)

    assert captured["cfg"].base_url == "https://api.example.test"
    assert captured["cfg"].api_key == "K"
    assert captured["cfg"].allow_insecure_tls is True
    assert captured["cfg"].timeout_s == 3.0
    assert isinstance(captured["verifier"], LoggingVerifier)


def test_make_client_normalizes_host_override(monkeypatch) -> None:
    captured = {}

    class _FakeClient:
        def __init__(self, client_cfg, *, verifier):
            captured["host"] = client_cfg.host

    monkeypatch.setattr("petitions_cli.http.PetitionsClient", _FakeClient)

    make_client(config.AppConfig(host="https://default.test", api_key="K"), host_override="override.test/")

    assert captured["host"] == "https://override.test"
