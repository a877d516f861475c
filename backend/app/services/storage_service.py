"""
Object store des CV élèves.

`ObjectStore` est le contrat (store / get_retrieval_url / delete) ; `LocalObjectStore`
écrit sous UPLOAD_DIR, servi en statique sur /uploads par l'application.
"""

import logging
import os
import secrets
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Optional, Protocol

from app.config import settings
from app.errors import TransientStoreError

logger = logging.getLogger(__name__)

RESUME_FOLDER = "student-resumes"


class ObjectStore(Protocol):
    def store(self, data: bytes, suggested_path: str) -> str: ...

    def get_retrieval_url(self, path: str) -> str: ...

    def delete(self, path: str) -> None: ...


class LocalObjectStore:
    """Stockage sur disque local. Les chemins retournés sont relatifs à base_dir."""

    def __init__(self, base_dir: Optional[str] = None, base_url: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.UPLOAD_DIR).resolve()
        self.base_url = (base_url or f"{settings.PUBLIC_BASE_URL}/uploads").rstrip("/")

    def store(self, data: bytes, suggested_path: str) -> str:
        target = self._resolve(suggested_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise TransientStoreError(f"Object store failure: {exc}")
        path = target.relative_to(self.base_dir).as_posix()
        logger.info("Fichier stocké : %s (%d octets)", path, len(data))
        return path

    def get_retrieval_url(self, path: str) -> str:
        return f"{self.base_url}/{self._resolve(path).relative_to(self.base_dir).as_posix()}"

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            raise TransientStoreError(f"Object store failure: {exc}")

    def _resolve(self, path: str) -> Path:
        """Refuse tout chemin qui sortirait de base_dir (../, chemin absolu)."""
        target = (self.base_dir / path.lstrip("/")).resolve()
        if target != self.base_dir and self.base_dir not in target.parents:
            raise ValueError(f"Invalid object path: {path}")
        return target


def resume_path(filename: Optional[str]) -> str:
    """Nom unique dans student-resumes/, en conservant l'extension du fichier envoyé."""
    ext = os.path.splitext(filename or "")[1].lower()
    return f"{RESUME_FOLDER}/{int(time.time() * 1000)}-{secrets.token_hex(6)}{ext}"


def store_with_timeout(store: ObjectStore, data: bytes, path: str, timeout: float) -> Optional[str]:
    """
    Envoie un fichier optionnel avec un délai maximum.
    Retourne le chemin stocké, ou None si l'envoi a échoué ou dépassé le délai.
    """
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(store.store, data, path)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        logger.warning("Envoi de %s abandonné après %.0f s", path, timeout)
        return None
    except (TransientStoreError, ValueError) as exc:
        logger.warning("Envoi de %s échoué : %s", path, exc)
        return None
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
