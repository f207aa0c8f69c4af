import logging

from config.log_config import APP_PACKAGES, LOGGING_CONFIG, SUCCESS_LEVEL, setup_logging


def test_app_packages_follow_requested_level():
    setup_logging(logging.INFO)

    for package in APP_PACKAGES:
        assert logging.getLogger(package).level == logging.INFO
    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("urllib3").level == logging.WARNING
    assert logging.getLogger("google").level == logging.WARNING


def test_base_config_is_not_mutated():
    setup_logging(logging.WARNING)

    assert LOGGING_CONFIG["root"]["level"] == "DEBUG"
    assert "domain" not in LOGGING_CONFIG["loggers"]


def test_success_level_registered():
    assert logging.getLevelName(SUCCESS_LEVEL) == "SUCCESS"
    assert hasattr(logging.getLogger("domain"), "success")
