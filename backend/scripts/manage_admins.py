"""
Gestion des comptes administrateurs en ligne de commande.

    python scripts/manage_admins.py list
    python scripts/manage_admins.py create admin@example.org 'Secret123' "Jane Admin"
    python scripts/manage_admins.py remove <admin_id>

Crée les tables manquantes avant de s'exécuter (utile sur une base neuve).
"""

import argparse
import logging
import sys

from app.database import SessionLocal, init_db
from app.services import admin_service
from app.services.identity_service import LocalIdentityProvider

logger = logging.getLogger("manage_admins")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gestion des administrateurs TeamMatch")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Lister les administrateurs")

    create = sub.add_parser("create", help="Créer ou mettre à jour un administrateur")
    create.add_argument("email")
    create.add_argument("password")
    create.add_argument("name", nargs="?", default="Admin User")

    remove = sub.add_parser("remove", help="Supprimer un administrateur et son identité")
    remove.add_argument("admin_id")
    return parser


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    args = build_parser().parse_args(argv)

    init_db()
    db = SessionLocal()
    try:
        identity = LocalIdentityProvider(db)

        if args.command == "list":
            result = admin_service.list_admins(db)
            if result.ok:
                if not result.value:
                    print("Aucun administrateur.")
                for admin in result.value:
                    print(f"{admin.id}  {admin.email}  {admin.name or ''}  ({admin.role})")
        elif args.command == "create":
            result = admin_service.create_admin(db, identity, args.email, args.password, args.name)
            if result.ok:
                print(f"Administrateur prêt : {result.value.email} (id={result.value.id})")
        else:
            result = admin_service.remove_admin(db, identity, args.admin_id)
            if result.ok:
                print(f"Administrateur supprimé : {result.value}")

        if not result.ok:
            logger.error("%s", result.error.message)
            return 1
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
