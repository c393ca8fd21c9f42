"""Tests for the anomaly engine exception hierarchy."""

import pytest

from stock_anomaly.exceptions import (AnomalyError, ConfigError,
                                      DataSourceError, DataValidationError)


def test_anomaly_error_is_base_exception() -> None:
    """AnomalyError should be catchable as Exception."""
    with pytest.raises(Exception):
        raise AnomalyError("test error")


@pytest.mark.parametrize("error_cls", [ConfigError, DataSourceError, DataValidationError])
def test_subclasses_inherit_from_anomaly_error(error_cls: type) -> None:
    """Every package error should be catchable as AnomalyError."""
    with pytest.raises(AnomalyError):
        raise error_cls("failure")


def test_data_validation_error_is_not_pydantic() -> None:
    """DataValidationError is distinct from pydantic's ValidationError."""
    from pydantic import ValidationError

    assert not issubclass(DataValidationError, ValidationError)


def test_exception_messages_preserved() -> None:
    """Exception messages should be accessible via str()."""
    msg = "detailed error message"
    err = ConfigError(msg)
    assert str(err) == msg
