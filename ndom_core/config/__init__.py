"""
Configuration Management
========================

Configuration utilities for document query and transformation.
"""

from ndom_core.config.settings import (
    XSLT_NAMESPACE,
    NDOMConfig,
    DocumentConfig,
    XPathConfig,
    TransformConfig,
    load_config,
    save_config,
    get_default_config,
    configure_logging,
)

__all__ = [
    "XSLT_NAMESPACE",
    "NDOMConfig",
    "DocumentConfig",
    "XPathConfig",
    "TransformConfig",
    "load_config",
    "save_config",
    "get_default_config",
    "configure_logging",
]
