from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


logger = logging.getLogger(__name__)

GAME_PREFIX = "/api/games/"


def _game_id_from_path(path: str) -> Optional[str]:
    if not path.startswith(GAME_PREFIX):
        return None
    rest = path[len(GAME_PREFIX) :]
    return rest.split("/", 1)[0] or None


class RequestIDLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log one line in, one line out.

    The id is echoed back in the ``x-request-id`` header and, when the path
    targets a game, the game id is added to the log context.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = uuid.uuid4().hex
        request.state.request_id = request_id
        context = {"request_id": request_id}
        game_id = _game_id_from_path(request.url.path)
        if game_id is not None:
            context["game_id"] = game_id

        logger.info(
            "request %s %s",
            request.method,
            request.url.path,
            extra=context,
        )
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        logger.info(
            "response %d",
            response.status_code,
            extra={**context, "duration_ms": int((time.perf_counter() - start) * 1000)},
        )
        return response
