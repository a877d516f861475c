"""
Modèle SQLAlchemy pour les équipes FIRST.
Aucune liste d'élèves n'est stockée côté équipe : le roster est toujours recalculé
à partir de students.matched_team_id.
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text, func, true

from app.database import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(128), primary_key=True)
    team_name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    zip_code = Column(String(10), nullable=False)
    first_level = Column(String(50), nullable=False)
    areas_of_need = Column(JSON, nullable=False, default=list)
    grade_range_min = Column(Integer, nullable=False)
    grade_range_max = Column(Integer, nullable=False)
    time_commitment = Column(Integer, nullable=False)
    qualities = Column(JSON, nullable=False, default=list)  # 3 maximum
    is_school_team = Column(Boolean, default=False)
    school_name = Column(String(255), nullable=True)
    team_awards = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
