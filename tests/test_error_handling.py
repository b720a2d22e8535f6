"""
Unit tests for the exception taxonomy and error-context helpers.
"""

import logging

import pytest

from fuelcell_control.config import SimulationParameters
from fuelcell_control.core.error_handling import coerce_model, error_context, with_error_context
from fuelcell_control.core.exceptions import (
    ConfigurationError,
    FuelCellControlException,
    ParameterError,
    SimulationCancelled,
    is_recoverable,
)


@pytest.mark.unit
class TestWithErrorContext:
    def test_foreign_errors_are_wrapped(self):
        @with_error_context("Dividing")
        def divide():
            return 1 / 0

        with pytest.raises(FuelCellControlException, match="Dividing failed") as exc_info:
            divide()
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)

    def test_package_errors_pass_through(self):
        @with_error_context("Validating")
        def validate():
            raise ParameterError("bad step")

        with pytest.raises(ParameterError, match="bad step"):
            validate()

    def test_no_reraise_returns_none(self):
        @with_error_context("Parsing", reraise=False)
        def parse():
            raise KeyError("x")

        assert parse() is None


@pytest.mark.unit
class TestErrorContextManager:
    def test_wraps(self):
        with pytest.raises(FuelCellControlException, match="Writing output failed"):
            with error_context("Writing output"):
                raise OSError("disk full")

    def test_suppresses_when_not_reraising(self):
        with error_context("Writing output", reraise=False):
            raise OSError("disk full")


@pytest.mark.unit
class TestCoerceModel:
    def test_model_instance_returned_unchanged(self):
        params = SimulationParameters(duration=10, time_step=1)

        assert coerce_model(SimulationParameters, params, ParameterError) is params

    def test_dict_validated(self):
        params = coerce_model(SimulationParameters, {"duration": 10, "timeStep": 2}, ParameterError)

        assert params.num_steps == 5

    def test_validation_error_mapped(self):
        with pytest.raises(ParameterError, match="Invalid SimulationParameters") as exc_info:
            coerce_model(SimulationParameters, {"duration": 10, "time_step": -1}, ParameterError)

        assert len(exc_info.value.context["errors"]) == 1

    def test_validation_failure_logged_at_debug_only(self):
        records = []

        class Recorder(logging.Handler):
            def emit(self, record):
                records.append(record)

        module_logger = logging.getLogger("fuelcell_control.core.error_handling")
        handler = Recorder(level=logging.DEBUG)
        previous_level = module_logger.level
        module_logger.addHandler(handler)
        module_logger.setLevel(logging.DEBUG)
        try:
            with pytest.raises(ParameterError):
                coerce_model(SimulationParameters, {"duration": 10, "time_step": 0}, ParameterError)
        finally:
            module_logger.removeHandler(handler)
            module_logger.setLevel(previous_level)

        assert records
        assert all(record.levelno == logging.DEBUG for record in records)


@pytest.mark.unit
class TestRecoverability:
    @pytest.mark.parametrize(
        "error,expected",
        [
            (ConfigurationError("x"), True),
            (ParameterError("x"), True),
            (SimulationCancelled(1.0, 1), False),
            (RuntimeError("x"), False),
        ],
    )
    def test_is_recoverable(self, error, expected):
        assert is_recoverable(error) is expected

    def test_input_errors_are_value_errors(self):
        assert isinstance(ConfigurationError("x"), ValueError)
        assert isinstance(ParameterError("x"), ValueError)
