"""
Error Handling Utilities for Fuel Cell Control System

Provides consistent error handling patterns across the codebase:
- Decorator for automatic error context
- Context manager for error handling
- Translation of pydantic validation failures into the package taxonomy

Usage:
    from fuelcell_control.core.error_handling import with_error_context

    @with_error_context("Dynamics step")
    def advance(self, state, dt, disturbances):
        ...
"""

import functools
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from fuelcell_control.core.exceptions import FuelCellControlException

logger = logging.getLogger(__name__)

# Type variable for function return type
F = TypeVar("F", bound=Callable[..., Any])
M = TypeVar("M", bound=BaseModel)


def with_error_context(
    operation: str,
    reraise: bool = True,
    log_level: int = logging.ERROR,
) -> Callable[[F], F]:
    """
    Decorator to add error context to function calls.

    Package exceptions pass through untouched. Anything else is logged with
    the operation name and re-raised wrapped in FuelCellControlException.

    Args:
        operation: Description of the operation (e.g., "Simulation run")
        reraise: If True, re-raise exception (wrapped if needed). If False, log and return None.
        log_level: Logging level for errors (default: ERROR)

    Returns:
        Decorated function
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except FuelCellControlException:
                raise
            except KeyboardInterrupt:
                raise
            except Exception as e:
                error_msg = f"{operation} failed: {e}"
                logger.log(log_level, error_msg, exc_info=True)
                if reraise:
                    raise FuelCellControlException(error_msg) from e
                return None

        return wrapper  # type: ignore

    return decorator


@contextmanager
def error_context(
    operation: str,
    reraise: bool = True,
    log_level: int = logging.ERROR,
):
    """
    Context manager for error handling with context.

    Usage:
        with error_context("Loading preset"):
            params = load_preset(name)

    Args:
        operation: Description of the operation
        reraise: If True, re-raise exception. If False, log and suppress.
        log_level: Logging level for errors
    """
    try:
        yield
    except FuelCellControlException:
        raise
    except KeyboardInterrupt:
        raise
    except Exception as e:
        error_msg = f"{operation} failed: {e}"
        logger.log(log_level, error_msg, exc_info=True)
        if reraise:
            raise FuelCellControlException(error_msg) from e


def coerce_model(
    model_cls: Type[M],
    data: Union[M, Dict[str, Any]],
    error_cls: Type[FuelCellControlException],
) -> M:
    """
    Validate ``data`` into ``model_cls``, raising ``error_cls`` on failure.

    Already-validated model instances are returned unchanged.
    """
    if isinstance(data, model_cls):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        logger.debug(f"Invalid {model_cls.__name__}: {problems}")
        raise error_cls(
            f"Invalid {model_cls.__name__}: {problems}",
            context={"errors": e.errors(include_url=False, include_context=False)},
        ) from e
