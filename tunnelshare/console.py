"""Startup text printed to the terminal (informative, not machine-parsed)."""

from pathlib import Path
from typing import Optional

from .tunnel.providers import TunnelConfig, TunnelProvider

BANNER_WIDTH = 64


def print_server_info(bind_url: str, shared_dir: Path) -> None:
    print(f"HTTP File Server running on {bind_url}")
    print(f"Shared directory: {shared_dir}")


def print_tunnel_details(
    provider: TunnelProvider, config: TunnelConfig, tunnel_name: Optional[str] = None
) -> None:
    print(f"\nTunnel provider: {provider.display_name}")
    print(f"Connecting to SSH server: {config.server_addr}:{config.server_port}")
    print(f"Username: {config.username}")
    if config.key_path:
        print(f"Using SSH key: {config.key_path}")
    else:
        print("Using password authentication")
    if tunnel_name:
        print(f"Tunnel name: {tunnel_name}")
    if config.bind_address:
        print(
            f"Forwarding {config.bind_address}:{config.remote_port} "
            f"to local port {config.local_port}"
        )
    else:
        print(
            f"Forwarding remote port {config.remote_port} "
            f"to local port {config.local_port}"
        )


def print_tunnel_banner(url: str) -> None:
    print("\n" + "=" * BANNER_WIDTH)
    print("🔗 TUNNEL ACTIVE")
    print(f"📡 External URL: {url}")
    print("=" * BANNER_WIDTH + "\n")


def print_usage(base_url: str) -> None:
    print("\nUsage:")
    print(f"  GET file:   curl {base_url}/<filename>")
    print(f"  POST file:  curl -X POST --data-binary @<file> {base_url}/<filename>")
    print(f"  List files: curl {base_url}/")


def print_external_usage(url: str) -> None:
    print_tunnel_banner(url)
    print("=== Reverse SSH Tunnel Active ===")
    print("Your server is now accessible externally!")
    print_usage(url)


def print_local_usage(local_port: int) -> None:
    print_usage(f"http://localhost:{local_port}")

    print("\n=== Running in Local Mode ===")
    print("To enable external access via pico.sh tuns (default):")
    print("  SSH_KEY_PATH=~/.ssh/id_ed25519 SSH_USER=<your-pico-username> tunnelshare")
    print("\nEnvironment variables:")
    print("  TUNNEL_PROVIDER    - Tunnel provider: 'pico' (default) or 'localhost.run'")
    print("  SSH_USER           - SSH username (required for pico.sh, optional for localhost.run)")
    print("  SSH_KEY_PATH       - Path to SSH private key")
    print("  SSH_SERVER         - SSH server address (defaults based on provider)")
    print("  SSH_PORT           - SSH server port (optional, defaults to 22)")
    print("  SSH_PASSWORD       - SSH password (alternative to key auth, needs sshpass)")
    print("  REMOTE_PORT        - Remote port to listen on (optional, defaults to 80)")
    print("  TUNNEL_NAME        - Tunnel subdomain name for pico.sh (optional)")
    print("  TUNNEL_URL_TIMEOUT - Seconds to wait for the tunnel URL (defaults to 10)")
    print("  SHARED_DIR         - Directory to share (defaults to the current directory)")
    print("  HOST / PORT        - Bind address (defaults to 127.0.0.1 and a random port)")
    print("\nExample with pico.sh tuns:")
    print("  SSH_KEY_PATH=~/.ssh/id_ed25519 SSH_USER=myuser tunnelshare")
    print("\nExample with localhost.run:")
    print("  TUNNEL_PROVIDER=localhost.run SSH_KEY_PATH=~/.ssh/id_ed25519 tunnelshare")
