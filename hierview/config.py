"""Configuration

Runtime settings come from environment variables (``HIERVIEW_*``) or a
``.env`` file. Layout geometry is split out into ``LayoutSettings`` so the
core can be used without any environment.
"""

from dataclasses import dataclass

from pydantic_settings import BaseSettings


@dataclass
class LayoutSettings:
    """Geometry and timing of the tree drawing"""

    width: float = 1200.0
    margin_top: float = 30.0
    margin_right: float = 150.0
    margin_bottom: float = 30.0
    margin_left: float = 100.0
    # Distance between neighbouring leaves
    node_separation: float = 35.0
    min_height: float = 600.0
    duration_ms: int = 750
    default_leaf_value: float = 5.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    - Storage: local JSON file, or a server URL (takes precedence when set)
    - Server: host and port for the tree API
    - Layout: drawing geometry passed to the controller
    """

    # Storage
    data_file: str = "data/tree.json"
    server_url: str = ""
    request_timeout: float = 10.0

    # Server
    host: str = "127.0.0.1"
    port: int = 3000

    # Logging
    log_dir: str = "logs"

    # Layout
    width: float = 1200.0
    margin_top: float = 30.0
    margin_right: float = 150.0
    margin_bottom: float = 30.0
    margin_left: float = 100.0
    node_separation: float = 35.0
    min_height: float = 600.0
    duration_ms: int = 750
    default_leaf_value: float = 5.0

    def layout_settings(self) -> LayoutSettings:
        return LayoutSettings(
            width=self.width,
            margin_top=self.margin_top,
            margin_right=self.margin_right,
            margin_bottom=self.margin_bottom,
            margin_left=self.margin_left,
            node_separation=self.node_separation,
            min_height=self.min_height,
            duration_ms=self.duration_ms,
            default_leaf_value=self.default_leaf_value,
        )

    class Config:
        env_prefix = "HIERVIEW_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
