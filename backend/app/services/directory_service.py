"""
Listes filtrées et triées des élèves et des équipes (dashboard d'administration).

Le tri est total : toute égalité sur la clé choisie est départagée par l'id, de sorte
que deux requêtes identiques retournent toujours le même ordre.
"""

from typing import List

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.models.student import Student
from app.models.team import Team
from app.errors import returns_result
from app.schemas.directory import SortOption, StudentFilter, TeamFilter
from app.schemas.student import StudentResponse
from app.schemas.team import TeamResponse


@returns_result
def list_students(
    db: Session,
    filters: StudentFilter = StudentFilter(),
    sort: SortOption = SortOption.NEWEST,
) -> List[StudentResponse]:
    query = select(Student)

    if filters.search:
        query = query.where(or_(
            Student.name.icontains(filters.search, autoescape=True),
            Student.email.icontains(filters.search, autoescape=True),
        ))
    if filters.zip_code:
        query = query.where(Student.zip_code == filters.zip_code)
    if filters.first_level:
        query = query.where(Student.first_level == filters.first_level)
    if filters.show_matched_only:
        query = query.where(Student.is_matched)
    if filters.show_unmatched_only:
        query = query.where(~Student.is_matched)

    query = query.order_by(*_order_by(Student, Student.name, sort))
    students = db.execute(query).scalars().all()
    return [StudentResponse.model_validate(s) for s in students]


@returns_result
def list_teams(
    db: Session,
    filters: TeamFilter = TeamFilter(),
    sort: SortOption = SortOption.NEWEST,
) -> List[TeamResponse]:
    query = select(Team)

    if filters.search:
        query = query.where(or_(
            Team.team_name.icontains(filters.search, autoescape=True),
            Team.email.icontains(filters.search, autoescape=True),
        ))
    if filters.zip_code:
        query = query.where(Team.zip_code == filters.zip_code)
    if filters.first_level:
        query = query.where(Team.first_level == filters.first_level)
    if filters.show_active_only:
        query = query.where(Team.is_active.is_(True))
    if filters.show_inactive_only:
        query = query.where(Team.is_active.is_(False))

    query = query.order_by(*_order_by(Team, Team.team_name, sort))
    teams = db.execute(query).scalars().all()
    return [TeamResponse.model_validate(t) for t in teams]


def _order_by(model, name_column, sort: SortOption) -> list:
    """Clé de tri demandée puis id croissant en départage."""
    if sort == SortOption.OLDEST:
        key = model.created_at.asc()
    elif sort == SortOption.NAME:
        key = func.lower(name_column).asc()
    elif sort == SortOption.LOCATION:
        key = model.zip_code.asc()
    else:
        key = model.created_at.desc()
    return [key, model.id.asc()]
