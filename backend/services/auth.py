from datetime import timedelta

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_async_db
from services.auth_service import AuthService
from shared.auth_models import AuthenticatedUser, AuthResponse, LoginRequest, RegisterRequest, UserProfile
from shared.config import config
from shared.errors import UnauthorizedError
from shared.response_models import APIResponse
from shared.time_utils import utcnow

ALGORITHM = "HS256"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def create_access_token(data: dict[str, str], expires_minutes: int | None = None) -> str:
    """Create JWT access token."""
    minutes = expires_minutes or config.get("access_token_expire_minutes", 1440)
    payload = dict(data)
    payload["exp"] = utcnow() + timedelta(minutes=minutes)
    return jwt.encode(payload, config.get("secret_key"), algorithm=ALGORITHM)


def decode_access_token(token: str) -> AuthenticatedUser:
    """Decode a bearer token into the identity it was issued for."""
    try:
        payload = jwt.decode(token, config.get("secret_key"), algorithms=[ALGORITHM])
    except JWTError as e:
        raise UnauthorizedError("Invalid token") from e

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise UnauthorizedError("Invalid token")
    return AuthenticatedUser(
        user_id=user_id,
        name=payload.get("name") or "",
        email=payload.get("email"),
        role=payload.get("role") or "user",
    )


async def get_current_user(token: str = Depends(oauth2_scheme)) -> AuthenticatedUser:
    """Resolve the authenticated user; trusted by owner-scoped operations."""
    return decode_access_token(token)


def get_auth_service(session: AsyncSession = Depends(get_async_db)) -> AuthService:
    return AuthService(session=session, token_factory=create_access_token)


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=APIResponse, status_code=201, summary="Register User")
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> APIResponse:
    """Create an account and return an access token."""
    result: AuthResponse = await auth_service.register(request)
    return APIResponse(data=result)


@router.post("/login", response_model=APIResponse, summary="User Login (JSON)")
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> APIResponse:
    """Authenticate user and return JWT access token via JSON."""
    result = await auth_service.login(request.email, request.password)
    return APIResponse(data=result)


@router.post("/token", summary="User Login (form)")
async def login_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, str]:
    """OAuth2 password flow for interactive API docs; ``username`` carries the email."""
    result = await auth_service.login(form_data.username, form_data.password)
    return {"access_token": result.access_token, "token_type": result.token_type}


@router.get("/profile", response_model=APIResponse, summary="Get Current User")
async def profile(
    current_user: AuthenticatedUser = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> APIResponse:
    """Get current authenticated user profile."""
    user: UserProfile = await auth_service.get_profile(current_user.user_id)
    return APIResponse(data=user)
