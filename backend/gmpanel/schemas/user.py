from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class UserDeviceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    browser_name: Optional[str] = None
    browser_family: Optional[str] = None
    os_name: Optional[str] = None
    os_family: Optional[str] = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    call_name: Optional[str] = None
    roles: List[str]
    device: Optional[UserDeviceOut] = None
