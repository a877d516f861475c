"""
Modèle SQLAlchemy pour la table students.
Le match est porté par la seule clé étrangère matched_team_id : is_matched en est dérivé.
"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.ext.hybrid import hybrid_property

from app.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(String(128), primary_key=True)  # = id de l'identité propriétaire
    email = Column(String(255), nullable=False)
    name = Column(String(200), nullable=False)
    school = Column(String(255), nullable=False)
    zip_code = Column(String(10), nullable=False)
    grade = Column(Integer, nullable=False)                 # 1-12
    first_level = Column(String(50), nullable=False)        # Cf. FIRST_LEVELS
    areas_of_interest = Column(JSON, nullable=False, default=list)
    time_commitment = Column(Integer, nullable=False)       # heures / semaine, 1-30
    impressive_things = Column(Text, nullable=False)
    why_join_team = Column(Text, nullable=False)
    resume_url = Column(String(500), nullable=True)         # chemin dans l'object store

    matched_team_id = Column(String(128), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @hybrid_property
    def is_matched(self) -> bool:
        return self.matched_team_id is not None

    @is_matched.expression
    def is_matched(cls):
        return cls.matched_team_id.is_not(None)
