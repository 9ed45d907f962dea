"""Authentication endpoints"""

from fastapi import APIRouter, Depends

from clubtable.api.deps import get_public_state, get_state
from clubtable.schemas.auth import CurrentUser, LoginRequest, SignupRequest, Token
from clubtable.state import AppState

router = APIRouter()


@router.post("/login", response_model=Token)
async def login(
    credentials: LoginRequest,
    state: AppState = Depends(get_public_state),
):
    """Log in against the club backend and return its token"""
    await state.api.login(credentials)
    return Token(access_token=state.session.token, user=state.session.user)


@router.post("/signup", response_model=Token, status_code=201)
async def signup(
    form: SignupRequest,
    state: AppState = Depends(get_public_state),
):
    """Create an account, then log in with it"""
    await state.api.signup(form)
    return Token(access_token=state.session.token, user=state.session.user)


@router.get("/me", response_model=CurrentUser)
async def get_current_user_info(state: AppState = Depends(get_state)):
    """Get current user information"""
    return state.session.user
