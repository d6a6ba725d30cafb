"""Tests for the source document parser."""
import pytest

from advssh.config.parser import ConfigParser, ParseError


class TestConfigParser:
    """Tests for ConfigParser."""

    def test_parse_empty_document(self):
        """An empty document loads nothing."""
        result = ConfigParser().parse("")

        assert result.hosts == {}
        assert result.templates == {}
        assert result.defaults is None
        assert result.includes == []

    def test_parse_hosts(self):
        parser = ConfigParser()
        result = parser.parse("""
hosts:
  web:
    HostName: web.example.com
    Port: 2222
    User: deploy
  "db*":
    hostname: "%h.db.example.com"
""")

        web = result.hosts["web"]
        assert web.host_name == "web.example.com"
        assert web.options["Port"] == "2222"
        assert web.options["User"] == "deploy"
        assert web.pattern == "web"
        assert result.hosts["db*"].host_name == "%h.db.example.com"

    def test_keys_are_case_insensitive(self):
        result = ConfigParser().parse("""
HOSTS:
  web:
    host_name: a
    IDENTITYFILE: ~/.ssh/id_ed25519
    Aliases: w
""")

        web = result.hosts["web"]
        assert web.host_name == "a"
        assert web.options["IdentityFile"] == ["~/.ssh/id_ed25519"]
        assert web.aliases == ["w"]

    def test_string_or_list_fields(self):
        result = ConfigParser().parse("""
includes: ~/.ssh/assh.d/*.yml
hosts:
  web:
    Aliases: [w, www]
    Inherits: base
    Gateways: [bastion, direct]
    IdentityFile: [a, b]
    ResolveNameservers: 8.8.8.8
""")

        web = result.hosts["web"]
        assert result.includes == ["~/.ssh/assh.d/*.yml"]
        assert web.aliases == ["w", "www"]
        assert web.inherits == ["base"]
        assert web.gateways == ["bastion", "direct"]
        assert web.options["IdentityFile"] == ["a", "b"]
        assert web.resolve_nameservers == ["8.8.8.8"]

    def test_boolean_values(self):
        result = ConfigParser().parse("""
hosts:
  web:
    ForwardAgent: yes
    Compression: false
    ControlMasterMkdir: true
""")

        web = result.hosts["web"]
        assert web.options["ForwardAgent"] == "yes"
        assert web.options["Compression"] == "no"
        assert web.control_master_mkdir == "yes"

    def test_templates_and_defaults(self):
        result = ConfigParser().parse("""
templates:
  base:
    User: admin
defaults:
  Port: 22
  User: root
""")

        assert result.templates["base"].is_template
        assert result.templates["base"].options["User"] == "admin"
        assert result.defaults.is_default
        assert result.defaults.options["User"] == "root"

    def test_null_host_entry(self):
        """A host with no attributes is still a host."""
        result = ConfigParser().parse("""
hosts:
  bare:
""")

        assert "bare" in result.hosts
        assert result.hosts["bare"].options == {}

    def test_hooks(self):
        result = ConfigParser().parse("""
hosts:
  web:
    Hooks:
      OnConnect: write connected to {{ host.name }}
      OnDisconnect:
        - exec echo bye
        - write done
""")

        hooks = result.hosts["web"].hooks
        assert hooks.on_connect == ["write connected to {{ host.name }}"]
        assert hooks.on_disconnect == ["exec echo bye", "write done"]
        assert hooks.before_connect == []

    def test_paths(self):
        result = ConfigParser().parse("""
asshknownhostfile: ~/.ssh/known
asshbinarypath: /usr/local/bin/assh
""")

        assert result.known_hosts_file == "~/.ssh/known"
        assert result.binary_path == "/usr/local/bin/assh"

    def test_unknown_key_is_ignored(self, caplog):
        result = ConfigParser().parse("""
hosts:
  web:
    NotAnOption: 1
    User: u
""")

        assert result.hosts["web"].options == {"User": "u"}
        assert "NotAnOption" in caplog.text

    def test_numeric_host_key(self):
        result = ConfigParser().parse("""
hosts:
  42:
    User: u
""")

        assert "42" in result.hosts

    def test_invalid_yaml_raises(self):
        with pytest.raises(ParseError) as exc:
            ConfigParser().parse("hosts: [unclosed")

        assert "yaml" in str(exc.value).lower()

    def test_top_level_list_raises(self):
        with pytest.raises(ParseError):
            ConfigParser().parse("- a\n- b\n")

    def test_bad_hosts_shape_raises(self):
        with pytest.raises(ParseError):
            ConfigParser().parse("hosts: [a, b]\n")

    def test_bad_host_entry_raises(self):
        with pytest.raises(ParseError):
            ConfigParser().parse("hosts:\n  web: just-a-string\n")
