"""Tests for process-wide settings and logging setup."""

import logging

import pytest

from sideloader import Resolver, Settings, configure, get_settings, reset_settings, setup_logging


class TestSettings:

    def test_defaults(self):
        settings = get_settings()

        assert settings.RAISE_ON_MISSING_SIDELOAD is True
        assert settings.SIDELOAD_CONCURRENCY is False
        assert settings.DEFAULT_PAGE_SIZE == 20

    def test_configure_overrides_process_wide(self):
        configure(RAISE_ON_MISSING_SIDELOAD=False, SIDELOAD_CONCURRENCY=True)

        assert get_settings().RAISE_ON_MISSING_SIDELOAD is False
        assert get_settings().SIDELOAD_CONCURRENCY is True

    def test_unknown_setting_is_rejected(self):
        with pytest.raises(ValueError, match="Unknown setting"):
            configure(RESPOND_TO=["json"])

    def test_reset_restores_defaults(self):
        configure(RAISE_ON_MISSING_SIDELOAD=False)

        assert reset_settings().RAISE_ON_MISSING_SIDELOAD is True

    def test_langfuse_disabled_without_keys(self):
        settings = Settings(LANGFUSE_PUBLIC_KEY=None, LANGFUSE_SECRET_KEY=None)

        assert settings.enable_langfuse is False
        assert Resolver(settings).langfuse is None

    def test_resolver_accepts_injected_settings(self, blog):
        settings = Settings(RAISE_ON_MISSING_SIDELOAD=False, LANGFUSE_PUBLIC_KEY=None)

        Resolver(settings).resolve(blog.posts_tree, blog.posts, {"missing": {}})

        assert get_settings().RAISE_ON_MISSING_SIDELOAD is True


class TestLogging:

    def test_setup_logging_writes_to_file(self, tmp_path):
        log_file = tmp_path / "logs" / "sideload.log"

        root = setup_logging(level=logging.DEBUG, log_file=log_file, log_to_console=False)
        try:
            logging.getLogger("sideloader.test").info("hello")
            for handler in root.handlers:
                handler.flush()

            assert "hello" in log_file.read_text(encoding="utf-8")
            assert logging.getLogger("langfuse").level == logging.WARNING
        finally:
            for handler in list(root.handlers):
                handler.close()
            root.handlers.clear()
