"""Write path shared by every state-changing operation.

All commands are processed synchronously while holding one process-wide
lock. A command's reads, validation, mutations and commit therefore
never interleave with another write, which keeps stock checks and order
transitions serializable on every provider.

Store faults surface as `PersistenceError` whether they happen while a
handler stages aggregates or when the unit of work commits.
"""

import threading

from protean.exceptions import ProteanException
from protean.utils.globals import current_domain

from marketplace.domain import logger
from marketplace.shared.errors import PersistenceError

_write_lock = threading.RLock()


def dispatch(command):
    """Process `command` in its own unit of work and return the handler's result."""
    with _write_lock:
        try:
            return current_domain.process(command, asynchronous=False)
        except ProteanException:
            raise
        except Exception as exc:
            command_name = type(command).__name__
            logger.error("Committing command failed", command=command_name, error=str(exc))
            raise PersistenceError({"_store": [f"Could not commit {command_name}: {exc}"]}) from exc


def persist(*aggregates):
    """Stage aggregates in the active unit of work.

    Store faults are raised as `PersistenceError`; the unit of work then
    rolls back and nothing staged so far is committed.
    """
    for aggregate in aggregates:
        try:
            current_domain.repository_for(type(aggregate)).add(aggregate)
        except ProteanException:
            raise
        except Exception as exc:
            logger.error(
                "Persisting aggregate failed",
                aggregate=type(aggregate).__name__,
                aggregate_id=str(aggregate.id),
                error=str(exc),
            )
            raise PersistenceError(
                {"_store": [f"Could not persist {type(aggregate).__name__} {aggregate.id}: {exc}"]}
            ) from exc
