"""
Configuration management for nodefs.

Handles loading and saving user configuration from:
- XDG config directory: $XDG_CONFIG_HOME/nodefs/config.json
  (usually ~/.config/nodefs/config.json)
- Fallback: ~/.nodefs/config.json
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class StorageConfig:
    """Storage backend settings."""
    root: Optional[str] = None
    backend: str = "local"


@dataclass
class CLIConfig:
    """CLI default options."""
    verbose: bool = False
    color: bool = True


@dataclass
class NodeFSConfig:
    """Main nodefs configuration."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    cli: CLIConfig = field(default_factory=CLIConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "storage": asdict(self.storage),
            "cli": asdict(self.cli),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NodeFSConfig':
        """Create from dictionary."""
        return cls(
            storage=StorageConfig(**data.get("storage", {})),
            cli=CLIConfig(**data.get("cli", {})),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows XDG Base Directory specification:
    1. $XDG_CONFIG_HOME/nodefs/config.json (usually ~/.config/nodefs/config.json)
    2. Fallback: ~/.nodefs/config.json

    Returns:
        Path to config file
    """
    xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "nodefs"
    else:
        config_dir = Path.home() / ".nodefs"

    return config_dir / "config.json"


def load_config() -> NodeFSConfig:
    """
    Load configuration from file.

    Returns:
        NodeFSConfig instance with loaded values or defaults
    """
    config_path = get_config_path()

    if not config_path.exists():
        return NodeFSConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return NodeFSConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}. Using default configuration")
        return NodeFSConfig()


def save_config(config: NodeFSConfig) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def ensure_config_exists() -> Path:
    """
    Ensure configuration file exists, creating with defaults if not.

    Returns:
        Path to config file
    """
    config_path = get_config_path()

    if not config_path.exists():
        save_config(NodeFSConfig())
        logger.info(f"Created default configuration at {config_path}")

    return config_path


def update_config(
    storage_root: Optional[str] = None,
    storage_backend: Optional[str] = None,
    cli_verbose: Optional[bool] = None,
    cli_color: Optional[bool] = None,
) -> NodeFSConfig:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.

    Returns:
        The updated configuration
    """
    config = load_config()

    if storage_root is not None:
        config.storage.root = storage_root
    if storage_backend is not None:
        config.storage.backend = storage_backend

    if cli_verbose is not None:
        config.cli.verbose = cli_verbose
    if cli_color is not None:
        config.cli.color = cli_color

    save_config(config)
    return config
