"""Share a local directory over HTTP, optionally through a reverse SSH tunnel."""

__version__ = "0.1.0"
