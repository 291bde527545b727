"""Request correlation ids.

The app middleware stores one id per request here; JsonFormatter stamps it
on every log line written while that request is being handled.
"""

import uuid
from contextvars import ContextVar, Token

# Visible across the sync and async code of one request
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

CORRELATION_ID_HEADER = "X-Correlation-ID"


def generate_correlation_id() -> str:
    """Fresh id for a request that arrived without one."""
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """Id of the request being handled, or "" outside a request."""
    return correlation_id_var.get()


def set_correlation_id(cid: str) -> Token[str]:
    """Bind ``cid`` to the current context; keep the token to undo it."""
    return correlation_id_var.set(cid)


def reset_correlation_id(token: Token[str]) -> None:
    correlation_id_var.reset(token)
