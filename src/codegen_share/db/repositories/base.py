"""Helpers shared by the SQL repositories."""

import functools
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from structlog import get_logger

from codegen_share.exceptions import StorageError


logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def storage_operation(
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[T]]:
    """Report database failures as StorageError.

    Integrity violations the repository understands are translated inside
    the method before they reach this wrapper.
    """

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(
                "storage_operation_failed",
                operation=func.__qualname__,
                error=str(e),
                exc_info=e,
            )
            raise StorageError(f"Storage operation failed: {func.__name__}") from e

    return wrapper
