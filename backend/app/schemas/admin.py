"""
Schémas Pydantic pour les administrateurs.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AdminResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
