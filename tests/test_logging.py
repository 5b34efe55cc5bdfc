"""Tests for logging utilities."""

import logging
import sys
from io import StringIO

import pytest

from nlpbench.logging import (
    _resolve_level,
    configure_logging,
    get_logger,
    set_log_level,
)


@pytest.fixture(autouse=True)
def restore_level():
    yield
    configure_logging(level=logging.WARNING, stream=sys.__stderr__)


def test_get_logger_prefixes_package_name():
    """Test that short names live under the package logger."""
    logger = get_logger("scenario_runner")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "nlpbench.scenario_runner"


def test_package_module_names_are_kept():
    """Test that names already inside the package are not prefixed twice."""
    assert get_logger("nlpbench.solvers.base").name == "nlpbench.solvers.base"
    assert get_logger().name == "nlpbench"


def test_get_logger_caching():
    assert get_logger("nlpbench.validation.validator") is get_logger("nlpbench.validation.validator")
    assert get_logger("a") is not get_logger("b")


def test_single_handler_and_no_propagation():
    logger = get_logger("handlers")
    get_logger("handlers")
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_configure_logging_redirects_output():
    """Test that configure_logging replaces handlers with the given stream."""
    logger = get_logger("nlpbench.solvers.factory")
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)

    logger.debug("Created solver scipy-slsqp")

    output = stream.getvalue()
    assert "[DEBUG] nlpbench.solvers.factory: Created solver scipy-slsqp" in output
    assert len(logger.handlers) == 1


def test_configure_logging_custom_format():
    logger = get_logger("formatting")
    stream = StringIO()
    configure_logging(level="INFO", format_string="%(levelname)s|%(message)s", stream=stream)
    logger.info("scenario passed")
    assert stream.getvalue().strip() == "INFO|scenario passed"


def test_set_log_level_updates_loggers_and_handlers():
    logger = get_logger("levels")

    set_log_level("ERROR")
    assert logger.level == logging.ERROR
    assert all(handler.level == logging.ERROR for handler in logger.handlers)

    set_log_level(logging.INFO)
    assert logger.level == logging.INFO


def test_new_loggers_use_current_default_level():
    set_log_level(logging.DEBUG)
    assert get_logger("created_after_level_change").level == logging.DEBUG


def test_level_names_are_case_insensitive():
    assert _resolve_level("debug") == logging.DEBUG
    assert _resolve_level("Error") == logging.ERROR
    assert _resolve_level(logging.INFO) == logging.INFO
    assert _resolve_level("not-a-level") == logging.WARNING
