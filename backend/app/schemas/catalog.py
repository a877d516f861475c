"""
Catalogues fixes partagés par l'inscription, les filtres d'administration et le frontend.
"""

from typing import Dict, List

from pydantic import BaseModel

# Niveaux du programme FIRST (valeur stockée → libellé affiché)
FIRST_LEVELS: Dict[str, str] = {
    "jr-first-lego-league": "Jr. FIRST Lego League",
    "first-lego-league": "FIRST Lego League",
    "first-tech-challenge": "FIRST Tech Challenge",
    "first-robotics-competition": "FIRST Robotics Competition",
}

AREAS: Dict[str, str] = {
    "hardware": "Hardware",
    "software": "Software",
    "outreach": "Outreach",
}

TEAM_QUALITIES: Dict[str, str] = {
    "teamwork": "Teamwork & Collaboration",
    "problem-solving": "Problem Solving",
    "creativity": "Creativity & Innovation",
    "leadership": "Leadership",
    "communication": "Communication Skills",
    "technical-skills": "Technical Skills",
    "perseverance": "Perseverance & Resilience",
    "mentorship": "Mentorship & Teaching",
    "organization": "Organization & Planning",
    "sportsmanship": "Gracious Professionalism",
}

MAX_TEAM_QUALITIES = 3
MIN_GRADE, MAX_GRADE = 1, 12
MIN_HOURS, MAX_HOURS = 1, 30


class CatalogEntry(BaseModel):
    value: str
    label: str


class CatalogResponse(BaseModel):
    first_levels: List[CatalogEntry]
    areas: List[CatalogEntry]
    team_qualities: List[CatalogEntry]
    max_team_qualities: int


def build_catalog() -> CatalogResponse:
    def entries(catalog: Dict[str, str]) -> List[CatalogEntry]:
        return [CatalogEntry(value=k, label=v) for k, v in catalog.items()]

    return CatalogResponse(
        first_levels=entries(FIRST_LEVELS),
        areas=entries(AREAS),
        team_qualities=entries(TEAM_QUALITIES),
        max_team_qualities=MAX_TEAM_QUALITIES,
    )
