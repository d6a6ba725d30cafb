"""Tests for host resolution, inheritance and defaults."""
import textwrap

import pytest

from advssh.config import (
    Config,
    HostNotFoundError,
    PatternError,
    ResolveOptions,
    compute_host,
)


def make_config(text: str) -> Config:
    config = Config()
    config.load_config(textwrap.dedent(text))
    return config


class TestLookup:
    """Tests for name lookup order."""

    def test_exact_match(self):
        config = make_config("""
            hosts:
              web:
                HostName: web.example.com
        """)

        host = config.get_host("web")

        assert host.name == "web"
        assert host.pattern == "web"
        assert host.host_name == "web.example.com"

    def test_pattern_match(self):
        """A glob host resolves the literal name it matched."""
        config = make_config("""
            hosts:
              "web*":
                HostName: srv
        """)

        host = config.get_host("web1")

        assert host.pattern == "web*"
        assert host.name == "web1"
        assert host.input_name == "web1"
        assert host.host_name == "srv"

    def test_pattern_match_expands_host_name(self):
        config = make_config("""
            hosts:
              "web*":
                HostName: "%h.example.com"
        """)

        assert config.get_host("web1").host_name == "web1.example.com"

    def test_already_expanded_input_is_kept(self):
        """An input matching the expanded form is not expanded twice."""
        config = make_config("""
            hosts:
              "web*":
                HostName: "%h.example.com"
        """)

        assert config.get_host("web1.example.com").host_name == "web1.example.com"

    def test_alias_match(self):
        config = make_config("""
            hosts:
              web:
                HostName: web.example.com
                Aliases: [www, "w?"]
        """)

        assert config.get_host("www").pattern == "web"
        assert config.get_host("w1").pattern == "web"
        assert config.get_host("w1").host_name == "web.example.com"

    def test_exact_match_beats_pattern(self):
        config = make_config("""
            hosts:
              "web*":
                User: pattern
              web1:
                User: exact
        """)

        assert config.get_host("web1").user == "exact"

    def test_multiple_patterns_resolve_lexicographically(self):
        """Overlapping patterns always resolve to the smallest key."""
        config = make_config("""
            hosts:
              "web*":
                User: second
              "w*":
                User: first
        """)

        for _ in range(5):
            assert config.get_host("web1").user == "first"

    def test_templates_are_not_connectable(self):
        config = make_config("""
            templates:
              base:
                User: admin
        """)

        with pytest.raises(HostNotFoundError) as exc:
            config.get_host("base")

        assert str(exc.value) == "no such host: base"

    def test_template_fallback(self):
        config = make_config("""
            templates:
              "tpl-*":
                User: admin
        """)

        host = config.resolve("tpl-x", ResolveOptions(allow_template_fallback=True))

        assert host.user == "admin"
        assert host.pattern == "tpl-*"

    def test_not_found(self):
        config = make_config("""
            hosts:
              web: {}
        """)

        with pytest.raises(HostNotFoundError):
            config.get_host("db")

    def test_virtual_host(self):
        config = make_config("""
            hosts:
              web: {}
        """)

        host = config.get_host_safe("db.example.com")

        assert host.host_name == "db.example.com"
        assert host.pattern == "db.example.com"
        assert host.name == "db.example.com"

    def test_malformed_pattern_propagates(self):
        config = make_config("""
            hosts:
              "web[12":
                User: u
        """)

        with pytest.raises(PatternError):
            config.get_host("web1")


class TestPaths:
    """Tests for "target/gateway" names."""

    def test_gateway_override(self):
        config = make_config("""
            hosts:
              web:
                Gateways: [direct]
        """)

        host = config.get_host("web/bastion")

        assert host.name == "web"
        assert host.gateways == ["bastion"]

    def test_nested_gateway_left_unexpanded(self):
        config = make_config("""
            hosts:
              web: {}
        """)

        assert config.get_host("web/bastion/edge").gateways == ["bastion/edge"]

    def test_gateway_lookup_does_not_split(self):
        config = make_config("""
            hosts:
              web: {}
        """)

        host = config.get_gateway_safe("a/b")

        assert host.name == "a/b"
        assert host.gateways == []


class TestInheritance:
    """Tests for Inherits handling."""

    def test_inherits_from_host_and_template(self):
        config = make_config("""
            templates:
              base:
                User: admin
                Port: 2222
            hosts:
              proxy:
                ForwardAgent: yes
              web:
                Port: 22
                Inherits: [base, proxy]
        """)

        host = config.get_host("web")

        assert host.user == "admin"
        assert host.options["Port"] == "22"
        assert host.options["ForwardAgent"] == "yes"

    def test_first_parent_wins(self):
        config = make_config("""
            hosts:
              a:
                User: from-a
              b:
                User: from-b
              web:
                Inherits: [a, b]
        """)

        assert config.get_host("web").user == "from-a"

    def test_cycle_terminates(self):
        """A -> B -> A resolves, B's attributes are merged once."""
        config = make_config("""
            hosts:
              a:
                User: user-a
                Inherits: b
              b:
                User: user-b
                Port: 2222
                Inherits: a
        """)

        a = config.get_host("a")
        b = config.get_host("b")

        assert a.user == "user-a"
        assert a.options["Port"] == "2222"
        assert b.user == "user-b"

    def test_self_inheritance_is_skipped(self):
        config = make_config("""
            hosts:
              a:
                User: u
                Inherits: a
        """)

        assert config.get_host("a").user == "u"

    def test_single_hop_only(self):
        """A parent's own parents are not followed."""
        config = make_config("""
            hosts:
              a:
                Inherits: b
              b:
                Port: 2222
                Inherits: c
              c:
                User: from-c
        """)

        host = config.get_host("a")

        assert host.options["Port"] == "2222"
        assert host.user == ""

    def test_missing_parent_is_not_fatal(self, caplog):
        config = make_config("""
            hosts:
              web:
                User: u
                Inherits: missing
        """)

        host = config.get_host("web")

        assert host.user == "u"
        assert "missing" in caplog.text

    def test_raw_host_is_not_modified(self):
        config = make_config("""
            templates:
              base:
                User: admin
            hosts:
              web:
                Inherits: base
        """)

        config.get_host("web")

        assert "User" not in config.hosts["web"].options


class TestDefaults:
    """Tests for the defaults merge."""

    def test_defaults_fill_unset_fields(self):
        config = make_config("""
            defaults:
              User: root
              Port: 2200
            hosts:
              web:
                User: admin
        """)

        host = config.get_host("web")

        assert host.user == "admin"
        assert host.options["Port"] == "2200"

    def test_defaults_not_applied_without_full_compute(self):
        config = make_config("""
            defaults:
              User: root
            hosts:
              web: {}
        """)

        host = config.resolve("web", ResolveOptions(expand_defaults=False))

        assert host.user == ""
        assert host.host_name == ""

    def test_host_name_defaults_to_name(self):
        config = make_config("""
            hosts:
              web: {}
        """)

        assert config.get_host("web").host_name == "web"

    def test_defaults_host_name_template(self):
        config = make_config("""
            defaults:
              HostName: "%h.corp.example.com"
            hosts:
              "app*": {}
        """)

        assert config.get_host("app3").host_name == "app3.corp.example.com"


class TestComputeHost:

    def test_blank_host(self):
        host = compute_host(None, Config(), "x", full_compute=True)

        assert host.name == "x"
        assert host.pattern == "x"
        assert host.host_name == "x"
