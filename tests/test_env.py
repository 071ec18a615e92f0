import os

from consulseeds.env import load_env


def test_missing_file(tmp_path):
    assert load_env(tmp_path / ".env") is False


def test_loads_without_overriding(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("# registry\nCONSUL_SERVICE_NAME=scylla\nCONSUL_URL=http://file:8500/\n")
    monkeypatch.setenv("CONSUL_URL", "http://process:8500/")
    monkeypatch.setenv("CONSUL_SERVICE_NAME", "placeholder")
    monkeypatch.delenv("CONSUL_SERVICE_NAME")

    assert load_env(env_file) is True
    assert os.environ["CONSUL_SERVICE_NAME"] == "scylla"
    assert os.environ["CONSUL_URL"] == "http://process:8500/"
