"""Requester identity forwarded by the upstream authentication gateway."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Header

ADMIN_ROLE = "admin"


@dataclass
class Requester:
    citizen_id: Optional[str] = None
    role: Optional[str] = None
    admin_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


async def get_requester(
    x_citizen_id: Optional[str] = Header(None),
    x_role: Optional[str] = Header(None),
    x_admin_id: Optional[str] = Header(None),
) -> Requester:
    return Requester(citizen_id=x_citizen_id, role=x_role, admin_id=x_admin_id)
