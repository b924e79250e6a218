from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from b2b_pricing.database.connection import get_db
from b2b_pricing.models.user import User
from b2b_pricing.schemas.user import Token, UserCreate, UserResponse
from b2b_pricing.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_refresh_token,
    create_refresh_token,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _token_claims(username: str, role: str) -> dict:
    return {"sub": username, "role": role}


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(data: UserCreate, db: Session = Depends(get_db)):
    """
    Register a buyer or intermediary. Pipeline links (agent, Gaddi,
    distributor) are stored as given and read at checkout time.
    """
    if db.query(User).filter(User.username == data.username).first():
        raise HTTPException(status_code=400, detail="Username already taken")

    user = User(
        username=data.username,
        email=data.email,
        hashed_password=get_password_hash(data.password),
        role=data.role.value,
        business_name=data.business_name,
        assigned_agent_id=data.assigned_agent_id,
        gaddi_id=data.gaddi_id,
        assigned_distributor_id=data.assigned_distributor_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == form_data.username).first()
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")

    claims = _token_claims(user.username, user.role)
    return Token(
        access_token=create_access_token(claims),
        refresh_token=create_refresh_token(claims),
    )


@router.post("/refresh", response_model=Token)
def refresh_token(refresh_token: str):
    token_data = decode_refresh_token(refresh_token)
    if not token_data.username:
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token")

    return Token(
        access_token=create_access_token(
            _token_claims(token_data.username, token_data.role)
        ),
    )
