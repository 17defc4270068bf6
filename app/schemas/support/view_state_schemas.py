from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional


class ViewStateSet(BaseModel):
    enabled: bool
    session_id: Optional[str] = None


class ViewStateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enabled: bool
    session_id: Optional[str]
    updated_at: Optional[datetime]
