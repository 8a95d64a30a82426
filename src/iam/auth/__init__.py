"""Caller authorization context supplied by the calling layer."""

from src.iam.auth.dependencies import get_caller_context, parse_project_ids
from src.iam.auth.models import CallerContext

__all__ = [
    "get_caller_context",
    "parse_project_ids",
    "CallerContext",
]
