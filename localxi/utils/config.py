"""
Runtime configuration for the Local XI lineup manager.

Values default to the constants module and can be overridden through
``LOCALXI_*`` environment variables.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import DEFAULT_DATA_DIR, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_SHAPE


@dataclass
class LineupConfig:
    """
    Settings passed explicitly into services and lineup sessions.

    Attributes:
        data_dir: Directory holding players.json, formations.json and lineups
        default_shape: Shape used to pick a formation when a match has no lineup yet
        host: Host address for the web server
        port: Port for the web server
    """
    data_dir: str = DEFAULT_DATA_DIR
    default_shape: str = DEFAULT_SHAPE
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LineupConfig":
        """Build a configuration from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            data_dir=env.get("LOCALXI_DATA_DIR", DEFAULT_DATA_DIR),
            default_shape=env.get("LOCALXI_DEFAULT_SHAPE", DEFAULT_SHAPE),
            host=env.get("LOCALXI_HOST", DEFAULT_HOST),
            port=int(env.get("LOCALXI_PORT", DEFAULT_PORT)),
        )
