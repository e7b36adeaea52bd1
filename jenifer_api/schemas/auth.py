"""Auth schemas: CurrentUser."""

import uuid

from pydantic import BaseModel


class CurrentUser(BaseModel):
    """Lightweight user context resolved from the forwarded identity + DB lookup."""

    user_id: uuid.UUID
    org_id: uuid.UUID
    email: str
    full_name: str
    timezone: str = "UTC"
