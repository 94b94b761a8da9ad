"""
PromptMaster Backend - Caller Identity
======================================

What:  FastAPI dependency that resolves which user a request acts for.
How:   Reads the X-User-ID header set by the client (or by the gateway in
       front of the API). Token issuance and password checks live outside
       this service; the backend only scopes prompt history by the ID it
       is given.
Who:   Every /api/prompts endpoint. Templates, languages and /health are public.

Accepted IDs: 1-64 characters from [A-Za-z0-9._:@-], e.g. a UUID or
"user:42". Anything else is rejected with 401 before the handler runs.
"""

import logging
import re
from typing import Optional

from fastapi import Header

from promptmaster.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-ID"
MAX_USER_ID_LENGTH = 64

_USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:@-]{1,%d}$" % MAX_USER_ID_LENGTH)


def resolve_user_id(raw: Optional[str]) -> str:
    """
    Validates a raw header value and returns the normalized user ID.

    Raises:
        AuthenticationError: header missing, blank, too long or malformed
    """
    user_id = (raw or "").strip()
    if not user_id:
        raise AuthenticationError(message=f"Missing {USER_ID_HEADER} header")
    if not _USER_ID_PATTERN.match(user_id):
        logger.warning("Rejected malformed %s header (%d chars)", USER_ID_HEADER, len(user_id))
        raise AuthenticationError(
            message=f"Invalid {USER_ID_HEADER} header",
            context={"length": len(user_id)},
        )
    return user_id


async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER),
) -> str:
    """
    FastAPI dependency.

    Usage:
        @router.get("/prompts")
        async def list_prompts(user_id: str = Depends(get_current_user_id)): ...
    """
    return resolve_user_id(x_user_id)
