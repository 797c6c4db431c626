"""Reverse SSH tunnel support for exposing the file server publicly.

Supports pico.sh tuns and localhost.run.
"""

from .factory import resolve_tunnel
from .orchestrator import start_tunnel
from .providers import TunnelConfig, TunnelProvider

__all__ = ["TunnelConfig", "TunnelProvider", "resolve_tunnel", "start_tunnel"]
