"""
Modèle SQLAlchemy pour les administrateurs.
Pas d'entité métier : sert uniquement au contrôle d'accès des routes d'administration.
"""

from sqlalchemy import Column, DateTime, String, func

from app.database import Base


class Admin(Base):
    __tablename__ = "admins"

    id = Column(String(128), primary_key=True)
    email = Column(String(255), nullable=False)
    name = Column(String(200), nullable=True)
    role = Column(String(50), nullable=False, default="admin")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
