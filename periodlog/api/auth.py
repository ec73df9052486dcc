"""Sign-up / sign-in through Firebase, then stateless JWT sessions."""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, EmailStr

from periodlog.api.deps import CurrentUser, Store, create_access_token, create_refresh_token, decode_token
from periodlog.exceptions import IdentityError
from periodlog.models.user import User, UserCreate, UserRole
from periodlog.rbac import role_options
from periodlog.services import identity
from periodlog.services.challenge import Challenge, new_challenge, verify_challenge
from periodlog.services.users import get_user, get_user_by_email, register_user_local

router = APIRouter()

ROLE_MISMATCH = "Incorrect role selected for this account."


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: User


class ChallengeAnswer(BaseModel):
    challenge_token: str
    challenge_answer: str


class LoginRequest(ChallengeAnswer):
    email: EmailStr
    password: str
    role: UserRole


class RegisterRequest(ChallengeAnswer):
    name: str
    email: EmailStr
    password: str
    role: UserRole
    avatar: str | None = None


class GoogleSignInRequest(BaseModel):
    id_token: str
    role: UserRole


class RefreshRequest(BaseModel):
    refresh_token: str


class EmailRequest(BaseModel):
    email: EmailStr


class CredentialsRequest(BaseModel):
    email: EmailStr
    password: str


def _tokens_for(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id, getattr(user.role, "value", user.role)),
        refresh_token=create_refresh_token(user.id),
        user=user,
    )


@router.get("/challenge", response_model=Challenge)
async def challenge():
    return new_challenge()


@router.get("/roles")
async def roles():
    return role_options()


@router.post("/register", status_code=201)
async def register(req: RegisterRequest, store: Store):
    verify_challenge(req.challenge_token, req.challenge_answer)
    existing = await get_user_by_email(store, req.email)
    if existing and existing.role != req.role:
        raise HTTPException(status_code=403, detail=ROLE_MISMATCH)
    session = await identity.sign_up(req.email, req.password)
    await identity.send_email_verification(session.id_token)
    user = await register_user_local(
        store,
        UserCreate(name=req.name, email=req.email, role=req.role, avatar=req.avatar),
    )
    # No session until the email is verified; the client shows the verify screen
    return {"user_id": user.id, "email": req.email, "verification_sent": True}


@router.post("/login", response_model=TokenResponse)
async def login(req: LoginRequest, store: Store):
    verify_challenge(req.challenge_token, req.challenge_answer)
    session = await identity.sign_in_with_password(req.email, req.password)
    if not session.email_verified:
        raise IdentityError("EMAIL_NOT_VERIFIED", req.email)

    user = await get_user_by_email(store, req.email)
    if not user:
        # Account exists with the provider but has no local profile yet
        user = await register_user_local(
            store, UserCreate(name=req.email.split("@")[0], email=req.email, role=req.role)
        )
    elif user.role != req.role:
        raise HTTPException(status_code=403, detail=ROLE_MISMATCH)
    return _tokens_for(user)


@router.post("/google", response_model=TokenResponse)
async def google_sign_in(req: GoogleSignInRequest, store: Store):
    account = await identity.verify_id_token(req.id_token)
    if not account.email:
        raise IdentityError("INVALID_ID_TOKEN", "Token carries no email")

    user = await get_user_by_email(store, account.email)
    if not user:
        user = await register_user_local(
            store,
            UserCreate(
                name=account.display_name or "Google User",
                email=account.email,
                role=req.role,
                avatar=account.photo_url,
            ),
        )
    elif user.role != req.role:
        raise HTTPException(status_code=403, detail=ROLE_MISMATCH)
    return _tokens_for(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(req: RefreshRequest, store: Store):
    user_id = decode_token(req.refresh_token, "refresh")
    user = await get_user(store, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return _tokens_for(user)


@router.post("/forgot-password")
async def forgot_password(req: EmailRequest):
    await identity.send_password_reset(req.email)
    return {"status": "sent"}


@router.post("/resend-verification")
async def resend_verification(req: CredentialsRequest):
    session = await identity.sign_in_with_password(req.email, req.password)
    if session.email_verified:
        return {"status": "already_verified"}
    await identity.send_email_verification(session.id_token)
    return {"status": "sent"}


@router.post("/logout")
async def logout(user: CurrentUser):
    await identity.sign_out(user.email)
    return {"status": "ok"}


@router.get("/me", response_model=User)
async def me(user: CurrentUser):
    return user
