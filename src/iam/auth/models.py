"""Data models for the calling layer's authorization context."""

from pydantic import BaseModel


class CallerContext(BaseModel):
    """
    Identity and project membership of the caller.

    Supplied by the calling layer (HTTP middleware or another service) after
    it has authenticated the request. Services use it to scope reads and
    writes to the caller's projects.

    Attributes:
        user_id: Id of the authenticated caller, recorded in audit fields
        project_ids: Projects the caller is authorized for

    Example:
        >>> caller = CallerContext(user_id="u1", project_ids=["p1", "p2"])
        >>> caller.has_project("p1")
        True
    """

    user_id: str = ""
    project_ids: list[str] = []

    def has_project(self, project_id: str) -> bool:
        """Return True if `project_id` is one of the caller's projects."""
        return project_id in set(self.project_ids)
