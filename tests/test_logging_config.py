"""Tests for logging configuration and sampler selection at startup."""

import logging

import pytest

from netglance.__main__ import build_sampler
from netglance.config import Settings
from netglance.fake_sampler import FakeSampler
from netglance.log_rotation import HeadTailFileHandler
from netglance.logging_config import configure_logging
from netglance.sampler import PingSampler


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


class TestConfigureLogging:
    """Test root logger setup."""

    def test_level_from_environment(self, monkeypatch, restore_root_logger):
        """Test NETGLANCE_LOG_LEVEL sets the root level."""
        monkeypatch.setenv("NETGLANCE_LOG_LEVEL", "debug")
        assert configure_logging() is None
        assert restore_root_logger.level == logging.DEBUG

    def test_unknown_level_defaults_to_info(self, monkeypatch, restore_root_logger):
        """Test an unknown level name falls back to INFO."""
        monkeypatch.setenv("NETGLANCE_LOG_LEVEL", "chatty")
        configure_logging()
        assert restore_root_logger.level == logging.INFO

    def test_file_handler_installed(self, tmp_path, monkeypatch, restore_root_logger):
        """Test a log file path installs a HeadTailFileHandler."""
        monkeypatch.delenv("NETGLANCE_LOG_LEVEL", raising=False)
        path = tmp_path / "nested" / "netglance.log"

        handler = configure_logging(str(path), head_lines=5, tail_lines=5, check_every=50)

        assert isinstance(handler, HeadTailFileHandler)
        assert handler in restore_root_logger.handlers
        assert handler.check_every == 50
        handler.flush()
        assert "Logging configured" in path.read_text(encoding="utf-8")


class TestBuildSampler:
    """Test sampler selection at startup."""

    def test_fake_requested(self):
        """Test NETGLANCE_SAMPLER=fake selects the simulated sampler."""
        sampler, message = build_sampler(Settings(sampler="fake"))
        assert isinstance(sampler, FakeSampler)
        assert "NETGLANCE_SAMPLER=fake" in message

    def test_configured_target_used(self):
        """Test a configured target is pinged as is."""
        sampler, message = build_sampler(Settings(ping_target="1.1.1.1"))
        assert isinstance(sampler, PingSampler)
        assert sampler.probe.target == "1.1.1.1"
        assert message is None

    def test_gateway_pinged_when_target_unset(self):
        """Test the default gateway is pinged when no target is configured."""
        sampler, message = build_sampler(Settings(), detect_gateway=lambda: "192.168.1.1")
        assert isinstance(sampler, PingSampler)
        assert sampler.probe.target == "192.168.1.1"
        assert message is None

    def test_public_fallback_without_gateway(self):
        """Test 8.8.8.8 is pinged when no gateway can be found."""
        sampler, _ = build_sampler(Settings(), detect_gateway=lambda: None)
        assert sampler.probe.target == "8.8.8.8"

    def test_bad_configuration_falls_back(self):
        """Test invalid probe settings fall back to simulated data."""
        sampler, message = build_sampler(Settings(ping_timeout_ms=0), detect_gateway=lambda: None)
        assert isinstance(sampler, FakeSampler)
        assert "configuration error" in message
