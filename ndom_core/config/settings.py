"""
Configuration Settings
======================

Configuration dataclasses for document query and transformation.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, List, Dict, Any
import json
import logging

import yaml

logger = logging.getLogger(__name__)

XSLT_NAMESPACE = "http://www.w3.org/1999/XSL/Transform"


@dataclass
class DocumentConfig:
    """Defaults for newly constructed documents."""

    version: str = "1.0"
    encoding: str = "utf-8"
    pretty_print: bool = False


@dataclass
class XPathConfig:
    """Namespace prefixes available to every XPath query."""

    namespaces: Dict[str, str] = field(
        default_factory=lambda: {"xsl": XSLT_NAMESPACE}
    )


@dataclass
class TransformConfig:
    """Transformation-related configuration."""

    stylesheet_dir: str = ""  # Empty means relative to the working directory
    isolate_stylesheet: bool = False  # Bind variables into a private copy
    variable_root_names: List[str] = field(
        default_factory=lambda: ["stylesheet", "transform"]
    )

    def resolve_path(self, path: Any) -> Path:
        """Resolve a stylesheet path against stylesheet_dir."""
        path = Path(path)
        if self.stylesheet_dir and not path.is_absolute():
            return Path(self.stylesheet_dir) / path
        return path


@dataclass
class NDOMConfig:
    """
    Complete configuration.

    Contains:
    - Document defaults (version, encoding)
    - XPath namespace prefixes
    - XSLT stylesheet handling

    Example:
        config = NDOMConfig()
        config.transform.isolate_stylesheet = True
        config.xpath.namespaces["db"] = "http://docbook.org/ns/docbook"
        save_config(config, Path("ndom.yaml"))
    """

    document: DocumentConfig = field(default_factory=DocumentConfig)
    xpath: XPathConfig = field(default_factory=XPathConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)

    log_level: str = "INFO"

    # Custom extensions
    custom: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'document': asdict(self.document),
            'xpath': asdict(self.xpath),
            'transform': asdict(self.transform),
            'log_level': self.log_level,
            'custom': self.custom,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'NDOMConfig':
        """Create from dictionary."""
        config = cls()

        if 'document' in data:
            config.document = DocumentConfig(**data['document'])
        if 'xpath' in data:
            config.xpath = XPathConfig(**data['xpath'])
        if 'transform' in data:
            config.transform = TransformConfig(**data['transform'])

        if 'log_level' in data:
            config.log_level = data['log_level']
        if 'custom' in data:
            config.custom = data['custom']

        return config


def load_config(config_path: Path) -> NDOMConfig:
    """
    Load configuration from file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config_path: Path to config file

    Returns:
        NDOMConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, 'r', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f) or {}
        elif suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Loaded configuration from {config_path}")
    return NDOMConfig.from_dict(data)


def save_config(config: NDOMConfig, config_path: Path) -> None:
    """
    Save configuration to file.

    Supports JSON and YAML formats based on file extension.

    Raises:
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    suffix = config_path.suffix.lower()
    if suffix not in ['.yaml', '.yml', '.json']:
        raise ValueError(f"Unsupported config format: {suffix}")

    data = config.to_dict()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        if suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved configuration to {config_path}")


def get_default_config() -> NDOMConfig:
    """Get default configuration."""
    return NDOMConfig()


def configure_logging(config: Optional[NDOMConfig] = None) -> logging.Logger:
    """Apply the configured log level to the ndom_core logger."""
    config = config or get_default_config()
    package_logger = logging.getLogger("ndom_core")
    package_logger.setLevel(config.log_level.upper())
    return package_logger
