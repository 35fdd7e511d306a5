"""Shared schema base classes"""
from typing import Optional

from pydantic import BaseModel


def to_camel(name: str) -> str:
    """snake_case -> camelCase, the wire format of every JSON field"""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class CamelModel(BaseModel):
    """Base model: camelCase on the wire, snake_case accepted on input"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(CamelModel):
    """Plain acknowledgement"""
    message: str
    id: Optional[int] = None
