from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


class EnrolledIdentity(BaseModel):
    id: str
    name: str
    descriptor: List[float]
    profile_image: Optional[str] = None  # base64 data URL or file path
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}
