"""Tests for tunnel provider and config resolution."""

import logging

from tunnelshare.tunnel.factory import resolve_provider, resolve_tunnel
from tunnelshare.tunnel.providers import TunnelProvider


class TestResolveProvider:
    """Test resolve_provider() selection logic."""

    def test_no_tunnel_inputs_is_local_mode(self, make_settings):
        assert resolve_provider(make_settings()) is None

    def test_key_path_defaults_to_pico(self, make_settings):
        settings = make_settings(ssh_key_path="~/.ssh/id_ed25519")
        assert resolve_provider(settings) is TunnelProvider.PICO

    def test_server_defaults_to_pico(self, make_settings):
        settings = make_settings(ssh_server="my.sish.host")
        assert resolve_provider(settings) is TunnelProvider.PICO

    def test_user_alone_is_local_mode(self, make_settings):
        assert resolve_provider(make_settings(ssh_user="me")) is None

    def test_explicit_localhost_run(self, make_settings):
        settings = make_settings(tunnel_provider="localhost.run")
        assert resolve_provider(settings) is TunnelProvider.LOCALHOST_RUN

    def test_explicit_overrides_key_path_default(self, make_settings):
        settings = make_settings(tunnel_provider="lhr", ssh_key_path="/k")
        assert resolve_provider(settings) is TunnelProvider.LOCALHOST_RUN

    def test_unknown_selector_is_local_mode(self, make_settings, caplog):
        settings = make_settings(tunnel_provider="ngrok", ssh_key_path="/k")
        with caplog.at_level(logging.WARNING):
            assert resolve_provider(settings) is None
        assert "Unknown tunnel provider 'ngrok'" in caplog.text

    def test_none_selector_forces_local_mode(self, make_settings):
        settings = make_settings(tunnel_provider="none", ssh_key_path="/k")
        assert resolve_provider(settings) is None

    def test_blank_selector_is_ignored(self, make_settings):
        settings = make_settings(tunnel_provider="  ", ssh_key_path="/k")
        assert resolve_provider(settings) is TunnelProvider.PICO

    def test_reads_environment(self, monkeypatch, make_settings):
        monkeypatch.setenv("TUNNEL_PROVIDER", "tuns.sh")
        assert resolve_provider(make_settings()) is TunnelProvider.PICO


class TestResolveTunnel:
    """Test resolve_tunnel() config assembly."""

    def test_local_mode_returns_none(self, make_settings):
        assert resolve_tunnel(make_settings(), 8080) is None

    def test_pico_without_user_fails(self, make_settings, caplog):
        settings = make_settings(ssh_key_path="/k")
        with caplog.at_level(logging.ERROR):
            assert resolve_tunnel(settings, 8080) is None
        assert "SSH_USER is required" in caplog.text

    def test_pico_config(self, make_settings):
        settings = make_settings(
            ssh_key_path="~/.ssh/id_ed25519", ssh_user="alice", tunnel_name="dev"
        )

        provider, config = resolve_tunnel(settings, 43210)

        assert provider is TunnelProvider.PICO
        assert config.server_addr == "tuns.sh"
        assert config.server_port == 22
        assert config.username == "alice"
        assert config.key_path == "~/.ssh/id_ed25519"
        assert config.password is None
        assert config.bind_address == "dev"
        assert config.remote_port == 80
        assert config.local_addr == "127.0.0.1"
        assert config.local_port == 43210

    def test_pico_without_tunnel_name(self, make_settings):
        settings = make_settings(ssh_key_path="/k", ssh_user="alice")
        _, config = resolve_tunnel(settings, 1)
        assert config.bind_address == ""

    def test_localhost_run_default_user(self, make_settings):
        settings = make_settings(tunnel_provider="localhost.run", ssh_key_path="/k")

        provider, config = resolve_tunnel(settings, 8080)

        assert provider is TunnelProvider.LOCALHOST_RUN
        assert config.username == "localhost"
        assert config.server_addr == "ssh.localhost.run"

    def test_localhost_run_ignores_tunnel_name(self, make_settings):
        settings = make_settings(tunnel_provider="lhr", tunnel_name="dev")
        _, config = resolve_tunnel(settings, 8080)
        assert config.bind_address == ""

    def test_overrides(self, make_settings):
        settings = make_settings(
            tunnel_provider="pico",
            ssh_user="bob",
            ssh_server="sish.example.com",
            ssh_port=2222,
            remote_port=443,
            ssh_password="secret",
        )

        _, config = resolve_tunnel(settings, 9000, local_addr="10.0.0.5")

        assert config.server_addr == "sish.example.com"
        assert config.server_port == 2222
        assert config.remote_port == 443
        assert config.password == "secret"
        assert config.key_path is None
        assert config.local_addr == "10.0.0.5"

    def test_keyless_passwordless_not_prevalidated(self, make_settings):
        settings = make_settings(tunnel_provider="lhr")
        _, config = resolve_tunnel(settings, 8080)
        assert config.key_path is None
        assert config.password is None

    def test_unparsable_ports_use_defaults(self, monkeypatch, make_settings):
        monkeypatch.setenv("SSH_PORT", "twenty-two")
        monkeypatch.setenv("REMOTE_PORT", "")
        settings = make_settings(tunnel_provider="lhr")

        _, config = resolve_tunnel(settings, 8080)

        assert config.server_port == 22
        assert config.remote_port == 80
