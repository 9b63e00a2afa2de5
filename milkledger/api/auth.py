from fastapi import APIRouter, Depends, HTTPException, status

from milkledger.api.deps import get_current_identity, get_store
from milkledger.core.errors import Conflict
from milkledger.schemas import LoginPayload, RegisterPayload, TokenResponse, User, UserRead
from milkledger.security.utils import create_access_token, hash_password, verify_password
from milkledger.store import RecordStore

router = APIRouter()  # main.py mounts at /auth


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterPayload, store: RecordStore = Depends(get_store)):
    # Prevent duplicate email
    if store.get_user_by_email(str(payload.email)):
        raise Conflict("Email already registered")

    user = User(
        email=str(payload.email),
        name=payload.name,
        password_hash=hash_password(payload.password),
    )
    store.add_user(user)
    return user


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginPayload, store: RecordStore = Depends(get_store)):
    user = store.get_user_by_email(str(payload.email))
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    access, _ = create_access_token(user.email, user.name)
    return TokenResponse(access_token=access)


@router.get("/me", response_model=UserRead)
def me(identity: dict = Depends(get_current_identity), store: RecordStore = Depends(get_store)):
    user = store.get_user_by_email(identity.get("sub", ""))
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user
