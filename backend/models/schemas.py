from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from repositories.db_models import ModelType, ReportStatus


class ModerationReportSearch(BaseModel):
    """
    Search criteria for moderation reports.

    ``id``, ``created_at`` and ``updated_at`` take range expressions
    (see helpers.search_filters). ``reason_matches`` supports ``*`` wildcards.
    """

    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    reason: Optional[str] = None
    reason_matches: Optional[str] = None
    creator_id: Optional[int] = None
    creator_name: Optional[str] = None
    model_type: Optional[ModelType] = None
    model_id: Optional[int] = None
    status: Optional[ReportStatus] = None
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=20, ge=1, le=100)

    model_config = ConfigDict(protected_namespaces=())
