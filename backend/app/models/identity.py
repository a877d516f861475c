"""
Modèle SQLAlchemy des identités du fournisseur d'identité local.
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from app.database import Base


class Identity(Base):
    __tablename__ = "identities"

    id = Column(String(128), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False)  # toujours en minuscules
    password_hash = Column(String(255), nullable=False)
    email_verified = Column(Boolean, default=False)
    session_version = Column(Integer, nullable=False, default=0)  # incrémenté à la déconnexion
    is_disabled = Column(Boolean, default=False)
    failed_attempts = Column(Integer, default=0)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
