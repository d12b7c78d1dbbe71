"""HTTP server with CGI endpoints for a CAN-to-Ethernet bridge's settings."""

__version__ = "2.0.0"
__all__ = ["parser", "config", "handlers", "content", "server", "app"]