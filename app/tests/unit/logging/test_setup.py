"""Tests for i18n_core.logging.setup module."""

import structlog

from i18n_core.logging import configure_logging, get_module_logger


class TestGetModuleLogger:
    """Tests for get_module_logger()."""

    def test_binds_calling_module(self):
        logger = get_module_logger()
        context = structlog.get_context(logger)
        assert context["module_path"] == __name__
        assert context["component"] == "test_setup"


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_returns_logger_under_pytest(self):
        logger = configure_logging(log_level="DEBUG", is_production=True)
        assert hasattr(logger, "info")
