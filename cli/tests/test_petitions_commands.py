import json

import pytest
import typer
from typer.testing import CliRunner

from petitions_cli import main
from petitions_cli.commands import petitions_cmd
from petitions_cli.config import AppConfig
from petitions_client import ApiConnectionError, ApiServerError

SERVER_ERROR = {"metadata": {"responseInfo": {"status": 500, "developerMessage": "db down"}}}


class _FakeClient:
    def __init__(self, fail: Exception | None = None) -> None:
        self.calls: list[tuple] = []
        self.closed = False
        self.fail = fail

    def _answer(self, *call) -> dict:
        self.calls.append(call)
        if self.fail is not None:
            raise self.fail
        return {
            "metadata": {"responseInfo": {"status": 200}},
            "results": [
                {
                    "id": "p1",
                    "title": "Save the bees",
                    "status": "open",
                    "signatureCount": 1200,
                    "created": 1355270400,
                }
            ],
        }

    def list_petitions(self, limit, offset, parameters):
        return self._answer("list_petitions", limit, offset, parameters)

    def get_petition(self, petition_id, *, mock=False):
        return self._answer("get_petition", petition_id, mock)

    def list_signatures(self, petition_id, limit, offset, parameters):
        return self._answer("list_signatures", petition_id, limit, offset, parameters)

    def send_signature(self, signature):
        return self._answer("send_signature", signature)

    def get_validations(self, petition_id, limit, offset):
        return self._answer("get_validations", petition_id, limit, offset)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch) -> _FakeClient:
    client = _FakeClient()
    monkeypatch.setattr(petitions_cmd, "load_config", lambda: AppConfig(host="https://api.example.test", api_key="K"))
    monkeypatch.setattr(petitions_cmd, "make_client", lambda *_args, **_kwargs: client)
    return client


def test_parse_params_builds_nested_mapping() -> None:
    assert petitions_cmd.parse_params(["status=open", "filter[type]=a=b", "flag"]) == {
        "status": "open",
        "filter": {"type": "a=b"},
        "flag": None,
    }


def test_parse_params_rejects_empty_key() -> None:
    with pytest.raises(typer.BadParameter):
        petitions_cmd.parse_params(["=x"])


def test_list_command_passes_paging_and_params(fake_client) -> None:
    result = CliRunner().invoke(main.app, ["list", "--limit", "5", "--offset", "10", "-p", "status=open"])

    assert result.exit_code == 0, result.output
    assert fake_client.calls == [("list_petitions", 5, 10, {"status": "open"})]
    assert fake_client.closed
    assert "Save the bees" in result.output
    assert "1,200" in result.output


def test_get_command_json_output(fake_client) -> None:
    result = CliRunner().invoke(main.app, ["get", "p1", "--mock", "--json"])

    assert result.exit_code == 0, result.output
    assert fake_client.calls == [("get_petition", "p1", True)]
    assert json.loads(result.output)["results"][0]["id"] == "p1"


def test_signatures_command(fake_client) -> None:
    result = CliRunner().invoke(main.app, ["signatures", "p1", "--limit", "3"])

    assert result.exit_code == 0, result.output
    assert fake_client.calls == [("list_signatures", "p1", 3, 0, {})]


def test_sign_command_sends_fields(fake_client) -> None:
    result = CliRunner().invoke(main.app, ["sign", "-f", "first_name=A", "-f", "email=a@example.test"])

    assert result.exit_code == 0, result.output
    assert fake_client.calls == [("send_signature", {"first_name": "A", "email": "a@example.test"})]
    assert "Signature submitted" in result.output


def test_sign_command_reads_json_file(fake_client, tmp_path) -> None:
    path = tmp_path / "signature.json"
    path.write_text('{"first_name": "A", "zip": "02101"}', encoding="utf-8")

    result = CliRunner().invoke(main.app, ["sign", "--file", str(path)])

    assert result.exit_code == 0, result.output
    assert fake_client.calls == [("send_signature", {"first_name": "A", "zip": "02101"})]


def test_sign_command_requires_fields(fake_client) -> None:
    result = CliRunner().invoke(main.app, ["sign"])

    assert result.exit_code == 2
    assert fake_client.calls == []


def test_validations_command(fake_client) -> None:
    result = CliRunner().invoke(main.app, ["validations", "--petition-id", "p1"])

    assert result.exit_code == 0, result.output
    assert fake_client.calls == [("get_validations", "p1", 10, 0)]


def test_server_error_exits_with_code_2(fake_client) -> None:
    fake_client.fail = ApiServerError(
        "Petitions API returned an error code: db down",
        response=SERVER_ERROR,
        request_url="https://api.example.test/petitions/p1.json?api_key=K",
    )

    result = CliRunner().invoke(main.app, ["get", "p1"])

    assert result.exit_code == 2
    assert "db down" in result.output
    assert fake_client.closed


def test_unreachable_host_on_connect_exits_with_code_2(monkeypatch) -> None:
    def _raise(*_args, **_kwargs):
        raise ApiConnectionError("Could not connect to Petitions API.", request_url="https://down.test/petitions.json")

    monkeypatch.setattr(petitions_cmd, "load_config", lambda: AppConfig(host="https://down.test", api_key="K"))
    monkeypatch.setattr(petitions_cmd, "make_client", _raise)

    result = CliRunner().invoke(main.app, ["list"])

    assert result.exit_code == 2
    assert "could not reach" in result.output


def test_missing_api_key_exits_with_code_2(monkeypatch) -> None:
    monkeypatch.setattr(petitions_cmd, "load_config", lambda: AppConfig(host="https://api.example.test"))

    result = CliRunner().invoke(main.app, ["list"])

    assert result.exit_code == 2
    assert "API key is not configured" in result.output


def test_config_set_and_show(tmp_path, monkeypatch) -> None:
    from petitions_cli import config

    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    for name in (config.ENV_API_HOST, config.ENV_API_KEY, config.ENV_ALLOW_INSECURE):
        monkeypatch.delenv(name, raising=False)
    runner = CliRunner()

    result = runner.invoke(main.app, ["config", "set", "--host", "https://api.example.test/", "--api-key", "K"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(main.app, ["config", "show"])
    assert result.exit_code == 0, result.output
    assert "host=https://api.example.test" in result.output
    assert "api_key=(set)" in result.output
    assert "allow_insecure_tls=false" in result.output
