# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# Sans cet import, la FK students.matched_team_id → teams.id échoue
# avec NoReferencedTableError si team.py n'est pas chargé avant student.py.

from app.models.identity import Identity  # noqa: F401
from app.models.team import Team  # noqa: F401  — doit précéder student
from app.models.student import Student  # noqa: F401
from app.models.admin import Admin  # noqa: F401
