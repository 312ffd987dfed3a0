from pydantic import BaseModel
from typing import Optional

class User(BaseModel):
    id: int
    email: str
    full_name: str = ""
    role: str = "technician"
    hashed_password: Optional[str] = None

    @property
    def is_manager(self) -> bool:
        return self.role == "manager"


class UserProfileResponse(BaseModel):
    id: int
    email: str
    full_name: str
    role: str
