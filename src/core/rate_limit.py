from __future__ import annotations

"""Admission control dependency for the search endpoint.

Attach with `dependencies=[Depends(enforce_admission)]` on the routes that
should be throttled. The stats endpoint does not use it.
"""

from fastapi import Request

from src.infrastructure.dependency_injection.ledger_dependencies import AdmissionControllerDep


def client_key(request: Request) -> str:
    """Rate limit key: the peer address as seen by the server."""
    return request.client.host if request.client else "unknown"


async def enforce_admission(request: Request, controller: AdmissionControllerDep) -> None:
    """Consume one token for the calling client.

    Raises:
        ThrottledError: If the client's bucket is empty (rendered as 429).
    """
    controller.check(client_key(request))
