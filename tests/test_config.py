"""
Configuration Tests

Run with: pytest tests/test_config.py -v
"""

import logging
from pathlib import Path

import pytest

from ndom_core.config import (
    XSLT_NAMESPACE,
    NDOMConfig,
    TransformConfig,
    configure_logging,
    get_default_config,
    load_config,
    save_config,
)


class TestDefaults:
    """Tests for default configuration values."""

    def test_document_defaults(self):
        config = get_default_config()
        assert config.document.version == "1.0"
        assert config.document.encoding == "utf-8"

    def test_xsl_prefix_bound(self):
        assert get_default_config().xpath.namespaces["xsl"] == XSLT_NAMESPACE

    def test_stylesheet_mutation_preserved_by_default(self):
        assert get_default_config().transform.isolate_stylesheet is False

    def test_instances_do_not_share_namespaces(self):
        a, b = NDOMConfig(), NDOMConfig()
        a.xpath.namespaces["x"] = "urn:x"
        assert "x" not in b.xpath.namespaces


class TestPersistence:
    """Tests for load_config and save_config."""

    @pytest.mark.parametrize("filename", ["ndom.yaml", "ndom.yml", "ndom.json"])
    def test_save_then_load(self, tmp_path, filename):
        config = NDOMConfig()
        config.document.encoding = "ISO-8859-1"
        config.transform.isolate_stylesheet = True
        config.xpath.namespaces["db"] = "http://docbook.org/ns/docbook"

        save_config(config, tmp_path / "conf" / filename)
        loaded = load_config(tmp_path / "conf" / filename)

        assert loaded.document.encoding == "ISO-8859-1"
        assert loaded.transform.isolate_stylesheet is True
        assert loaded.xpath.namespaces["db"] == "http://docbook.org/ns/docbook"

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "partial.yaml"
        path.write_text("log_level: DEBUG\n", encoding="utf-8")
        config = load_config(path)
        assert config.log_level == "DEBUG"
        assert config.document.version == "1.0"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "conf.ini"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)
        with pytest.raises(ValueError):
            save_config(NDOMConfig(), path)


class TestHelpers:
    """Tests for path resolution and logging setup."""

    def test_resolve_relative_path(self):
        config = TransformConfig(stylesheet_dir="/styles")
        assert config.resolve_path("a.xsl") == Path("/styles/a.xsl")

    def test_absolute_path_untouched(self, tmp_path):
        config = TransformConfig(stylesheet_dir="/styles")
        assert config.resolve_path(tmp_path / "a.xsl") == tmp_path / "a.xsl"

    def test_no_stylesheet_dir(self):
        assert TransformConfig().resolve_path("a.xsl") == Path("a.xsl")

    def test_configure_logging(self):
        config = NDOMConfig(log_level="debug")
        package_logger = configure_logging(config)
        assert package_logger.name == "ndom_core"
        assert package_logger.level == logging.DEBUG
        configure_logging()
        assert package_logger.level == logging.INFO
