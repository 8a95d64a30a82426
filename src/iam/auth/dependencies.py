"""FastAPI dependencies resolving the caller's authorization context."""

import logging

from fastapi import Header

from src.iam.auth.models import CallerContext

logger = logging.getLogger(__name__)


def parse_project_ids(header_value: str | None) -> list[str]:
    """
    Split a comma-separated X-Project-Ids header.

    Blank entries are dropped and order is kept; duplicates are removed.
    """
    if not header_value:
        return []

    project_ids: list[str] = []
    for raw in header_value.split(","):
        project_id = raw.strip()
        if project_id and project_id not in project_ids:
            project_ids.append(project_id)
    return project_ids


async def get_caller_context(
    x_user_id: str | None = Header(default=None),
    x_project_ids: str | None = Header(default=None),
) -> CallerContext:
    """
    Build the caller context from headers set by the upstream auth middleware.

    Headers:
        X-User-Id: Authenticated user id
        X-Project-Ids: Comma-separated project ids the user may act on

    A request without X-Project-Ids gets an empty project set, which matches
    no auth provider.

    Example:
        @router.get("/auth-providers")
        async def list_providers(caller: CallerContext = Depends(get_caller_context)):
            return get_auth_provider_service().get_all(caller)
    """
    caller = CallerContext(user_id=x_user_id or "", project_ids=parse_project_ids(x_project_ids))
    logger.debug(
        "Resolved caller context",
        extra={"user_id": caller.user_id, "project_count": len(caller.project_ids)},
    )
    return caller
