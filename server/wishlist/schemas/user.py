from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserOut(BaseModel):
    id: int
    username: str
    is_active: bool
    role: str
    is_admin: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
