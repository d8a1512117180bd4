# apps/core/results.py
"""
Result envelopes returned by every operation at the action boundary.
"""
import functools
import logging

from .exceptions import ServiceError

logger = logging.getLogger(__name__)


def action_result(**payload):
    """Successful envelope carrying any extra payload keys."""
    return {'success': True, **payload}


def action_error(message):
    return {'success': False, 'error': message}


def service_action(failure_message):
    """
    Decorator for action-boundary functions.

    ``ServiceError`` subclasses become failure envelopes carrying their own
    message. Anything else is treated as an infrastructure failure: logged
    with its traceback and reported with ``failure_message`` only.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ServiceError as e:
                logger.info(f"{func.__name__} rejected: {e.message}")
                return action_error(e.message)
            except Exception:
                logger.exception(f"Unhandled error in {func.__name__}")
                return action_error(failure_message)
        return wrapper
    return decorator
