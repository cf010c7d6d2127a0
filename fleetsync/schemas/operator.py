# fleetsync/schemas/operator.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import datetime


class OperatorRef(BaseModel):
    """Identity stamped on vehicles and audit entries by an edit."""
    id: str
    name: str


class OperatorOut(BaseModel):
    id: str
    name: str
    connection_id: str
    last_active: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
