from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional

Record = Dict[str, Any]


class RunRecord(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = None
    status: Optional[str] = None  # READY | RUNNING | SUCCEEDED | FAILED | TIMED-OUT | ABORTED ...
    dataset_id: Optional[str] = Field(default=None, alias="defaultDatasetId")


class MediaResponse(BaseModel):
    video: Optional[str] = None
    raw: Dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
    code: str
    details: Optional[str] = None
