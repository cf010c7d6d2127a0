# fleetsync/schemas/audit.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import datetime
from enum import Enum


class AuditAction(str, Enum):
    STATUS_CHANGE = "STATUS_CHANGE"
    NOTES_UPDATE = "NOTES_UPDATE"
    LOCATION_CHANGE = "LOCATION_CHANGE"
    CREATED = "CREATED"
    DELETED = "DELETED"


class AuditEntryOut(BaseModel):
    id: str
    vehicle_id: str
    vehicle_name: str
    action: AuditAction
    field: str = ""
    old_value: str = ""      # "" means no prior value
    new_value: str = ""
    timestamp: datetime
    user_id: str
    user_name: str

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
