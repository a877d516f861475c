"""
Router d'authentification (fournisseur d'identité) et du dashboard de l'utilisateur connecté.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user_id, get_identity_provider, http_error, unwrap
from app.errors import IdentityError
from app.schemas.auth import (
    EmailRequest,
    PasswordResetConfirm,
    SignInRequest,
    TokenRequest,
    TokenResponse,
    UserProfile,
)
from app.schemas.match import UserMatchesResponse
from app.services import match_service, profile_service
from app.services.identity_service import LocalIdentityProvider

router = APIRouter(prefix="/api/v1/auth", tags=["Authentification"])


@router.post("/signin", response_model=TokenResponse, summary="Se connecter")
def sign_in(data: SignInRequest, identity: LocalIdentityProvider = Depends(get_identity_provider)):
    try:
        user_id = identity.verify_credentials(data.email, data.password)
        return TokenResponse(access_token=identity.issue_session_token(user_id), user_id=user_id)
    except IdentityError as e:
        raise http_error(e)


@router.post("/signout", status_code=204, summary="Se déconnecter")
def sign_out(
    user_id: str = Depends(get_current_user_id),
    identity: LocalIdentityProvider = Depends(get_identity_provider),
):
    """Invalide toutes les sessions ouvertes de l'utilisateur."""
    identity.destroy_session(user_id)


@router.post("/resend-verification", status_code=202, summary="Renvoyer l'email de vérification")
def resend_verification(
    user_id: str = Depends(get_current_user_id),
    identity: LocalIdentityProvider = Depends(get_identity_provider),
):
    identity.send_verification_email(user_id)
    return {"status": "sent"}


@router.post("/verify-email", summary="Confirmer l'adresse email")
def verify_email(data: TokenRequest, identity: LocalIdentityProvider = Depends(get_identity_provider)):
    try:
        user_id = identity.confirm_email(data.token)
    except IdentityError as e:
        raise http_error(e)
    return {"user_id": user_id, "email_verified": True}


@router.post("/password-reset", status_code=202, summary="Demander une réinitialisation du mot de passe")
def request_password_reset(data: EmailRequest, identity: LocalIdentityProvider = Depends(get_identity_provider)):
    """Répond toujours 202, que l'adresse existe ou non."""
    identity.send_password_reset(data.email)
    return {"status": "sent"}


@router.post("/password-reset/confirm", summary="Choisir un nouveau mot de passe")
def confirm_password_reset(
    data: PasswordResetConfirm,
    identity: LocalIdentityProvider = Depends(get_identity_provider),
):
    try:
        user_id = identity.confirm_password_reset(data.token, data.new_password)
    except IdentityError as e:
        raise http_error(e)
    return {"user_id": user_id}


@router.get("/me", response_model=UserProfile, summary="Profil de l'utilisateur connecté")
def get_me(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return unwrap(profile_service.get_user_profile(db, user_id))


@router.get("/me/matches", response_model=UserMatchesResponse, summary="Matchs de l'utilisateur connecté")
def get_my_matches(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return unwrap(match_service.get_user_matches(db, user_id))
