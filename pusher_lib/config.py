"""
Client configuration for the Pusher Channels HTTP API.

A configuration is immutable and is passed explicitly to every operation.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote, urlparse

DEFAULT_HOST = "api.pusherapp.com"


@dataclass(frozen=True)
class PusherConfig:
    """Application credentials and connection settings."""

    app_id: str
    key: str
    secret: str
    ssl: bool = True
    cluster: Optional[str] = None
    port: Optional[int] = None
    host: Optional[str] = None

    @property
    def scheme(self) -> str:
        return "https" if self.ssl else "http"

    @property
    def effective_port(self) -> int:
        if self.port is not None:
            return self.port
        return 443 if self.ssl else 80

    @property
    def effective_host(self) -> str:
        """
        Resolve the API host.

        An explicit host wins over a cluster; without either the legacy
        default host is used.
        """
        if self.host:
            return self.host
        if self.cluster:
            return f"api-{self.cluster}.pusher.com"
        return DEFAULT_HOST

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.effective_host}:{self.effective_port}"

    @classmethod
    def from_url(cls, url: str) -> "PusherConfig":
        """
        Build a configuration from an application URL.

        Expected format:
        http[s]://<key>:<secret>@<host>[:port]/apps/<app_id>

        Args:
            url: The application URL

        Returns:
            PusherConfig for the URL

        Raises:
            ValueError: If the URL is missing credentials, host or app id
        """
        parsed = urlparse(url)

        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"Unsupported URL scheme: {parsed.scheme!r}")

        # Credentials come from the userinfo part
        if not parsed.username or not parsed.password:
            raise ValueError("URL must include key and secret")

        if not parsed.hostname:
            raise ValueError("URL must include a host")

        # Path must be exactly /apps/<app_id>
        path_parts = [p for p in parsed.path.split("/") if p]
        if len(path_parts) != 2 or path_parts[0] != "apps":
            raise ValueError("URL path must be /apps/<app_id>")

        # Userinfo is percent-encoded in the URL
        return cls(
            app_id=path_parts[1],
            key=unquote(parsed.username),
            secret=unquote(parsed.password),
            ssl=parsed.scheme == "https",
            port=parsed.port,
            host=parsed.hostname,
        )
