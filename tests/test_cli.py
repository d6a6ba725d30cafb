"""Tests for the advssh command line."""
import json
import logging

import pytest

from advssh.cli import main


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Point every advssh path at tmp_path."""
    source = tmp_path / "assh.yml"
    source.write_text("""
hosts:
  web1:
    HostName: 10.0.0.1
    User: deploy
    Hooks:
      BeforeConnect:
        - write connecting to {{ host.name }}
  db*:
    Port: 5432
defaults:
  User: root
""")
    monkeypatch.setenv("ADVSSH_CONFIG", str(source))
    monkeypatch.setenv("ADVSSH_SSH_CONFIG", str(tmp_path / "ssh_config"))
    monkeypatch.setenv("ADVSSH_KNOWN_HOSTS", str(tmp_path / "known_hosts"))
    monkeypatch.setenv("ADVSSH_LOG_FILE", str(tmp_path / "log" / "advssh.log"))
    monkeypatch.delenv("ADVSSH_BINARY", raising=False)
    yield tmp_path
    logging.getLogger("advssh").handlers.clear()


class TestBuild:

    def test_writes_ssh_config(self, env):
        assert main(["build"]) == 0

        output = (env / "ssh_config").read_text()
        assert "Host web1\n" in output
        assert "  HostName 10.0.0.1\n" in output
        assert "Host *\n  User root\n" in output

    def test_binary_override(self, env):
        assert main(["--binary", "/opt/advssh", "build"]) == 0

        output = (env / "ssh_config").read_text()
        assert "  ProxyCommand /opt/advssh connect --port=%p %h\n" in output

    def test_missing_source(self, env):
        assert main(["--config", str(env / "missing.yml"), "build"]) == 1
        assert not (env / "ssh_config").exists()

    def test_invalid_source(self, env):
        (env / "assh.yml").write_text("hosts: [unclosed")

        assert main(["build"]) == 1


    def test_malformed_host_pattern(self, env):
        (env / "assh.yml").write_text("""
hosts:
  "web[z-a]":
    User: deploy
""")

        assert main(["info", "webx"]) == 1


class TestJson:

    def test_dumps_config(self, env, capsys):
        assert main(["json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["hosts"]["web1"]["User"] == "deploy"
        assert data["defaults"]["User"] == "root"


class TestInfo:

    def test_computed_host(self, env, capsys):
        assert main(["info", "db1"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["name"] == "db1"
        assert data["pattern"] == "db*"
        assert data["config"]["Port"] == "5432"
        assert data["config"]["User"] == "root"
        assert data["config"]["HostName"] == "db1"

    def test_unknown_host(self, env, capsys):
        assert main(["info", "nowhere"]) == 1
        assert capsys.readouterr().out == ""


class TestWrapper:

    @pytest.fixture
    def execv(self, monkeypatch):
        calls = []
        monkeypatch.setattr("advssh.cli.shutil.which", lambda name: f"/usr/bin/{name}")
        monkeypatch.setattr("advssh.cli.os.execv", lambda path, argv: calls.append((path, argv)))
        return calls

    def test_rebuilds_and_execs(self, env, execv, capsys):
        assert main(["wrapper", "ssh", "web1", "uptime"]) == 0

        assert (env / "ssh_config").exists()
        assert execv == [("/usr/bin/ssh", ["ssh", "web1", "uptime"])]
        assert capsys.readouterr().out == "connecting to web1\n"

    def test_records_dynamic_gateway_segments(self, env, execv):
        assert main(["wrapper", "ssh", "db1/db2"]) == 0

        recorded = (env / "known_hosts").read_text().split()
        assert sorted(recorded) == ["db1", "db2"]

    def test_up_to_date_config_is_kept(self, env, execv):
        assert main(["build"]) == 0
        before = (env / "ssh_config").read_text()

        assert main(["wrapper", "ssh", "web1"]) == 0

        assert (env / "ssh_config").read_text() == before

    def test_ssh_options_before_target(self, env, execv):
        assert main(["wrapper", "ssh", "-A", "-p", "2222", "-L", "8080:localhost:80", "web1", "uptime", "-v"]) == 0

        assert execv == [(
            "/usr/bin/ssh",
            ["ssh", "-A", "-L", "8080:localhost:80", "-p", "2222", "web1", "uptime", "-v"],
        )]

    def test_binary_not_found(self, env, monkeypatch):
        monkeypatch.setattr("advssh.cli.shutil.which", lambda name: None)

        assert main(["wrapper", "nossh", "web1"]) == 1
