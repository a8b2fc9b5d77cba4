"""Tests for logging setup."""

import logging

from helix.core.logging import MASK, redact_secrets, setup_logging


class TestRedactSecrets:
    """Tests for the secret-masking processor."""

    def test_masks_secret_keys(self):
        event = redact_secrets(None, "info", {"event": "login", "admin_token": "s3cret"})
        assert event == {"event": "login", "admin_token": MASK}

    def test_leaves_other_keys(self):
        event = redact_secrets(None, "info", {"event": "saved", "key": "siteTitle"})
        assert event == {"event": "saved", "key": "siteTitle"}

    def test_empty_secret_not_masked(self):
        event = redact_secrets(None, "warning", {"event": "denied", "authorization": ""})
        assert event["authorization"] == ""


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_sets_root_level(self):
        try:
            setup_logging(level="ERROR", json_logs=True)
            assert logging.getLogger().level == logging.ERROR
            assert logging.getLogger("uvicorn").level == logging.ERROR
        finally:
            setup_logging()

    def test_unknown_level_falls_back_to_info(self):
        try:
            setup_logging(level="chatty")
            assert logging.getLogger().level == logging.INFO
        finally:
            setup_logging()
