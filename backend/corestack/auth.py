from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from corestack import models, schemas
from corestack.database import get_db
from corestack.services.settings_loader import get_access_token_expire_minutes, get_secret_key
import secrets

SECRET_KEY = get_secret_key()
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = get_access_token_expire_minutes()
REFRESH_TOKEN_EXPIRE_DAYS = 7

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")

def truncate_password_for_bcrypt(password: str) -> str:
    """
    Truncate password to 72 bytes for bcrypt compatibility.
    We truncate by bytes (not characters) so multi-byte UTF-8 characters are never split.
    """
    password_bytes = password.encode('utf-8')
    if len(password_bytes) <= 72:
        return password
    return password_bytes[:72].decode('utf-8', errors='ignore')

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(truncate_password_for_bcrypt(plain_password), hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(truncate_password_for_bcrypt(password))

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def verify_refresh_token(token: str, db: Session) -> Optional[models.RefreshToken]:
    """Return the stored refresh token if it is active and not expired"""
    return db.query(models.RefreshToken).filter(
        models.RefreshToken.token == token,
        models.RefreshToken.revoked == 0,
        models.RefreshToken.expires_at > datetime.utcnow()
    ).first()

def create_refresh_token_for_user(user_id: int, db: Session) -> models.RefreshToken:
    """Issue a new refresh token; every earlier token of the user is revoked"""
    db.query(models.RefreshToken).filter(
        models.RefreshToken.user_id == user_id,
        models.RefreshToken.revoked == 0
    ).update({"revoked": 1})

    refresh_token = models.RefreshToken(
        token=secrets.token_urlsafe(32),
        user_id=user_id,
        expires_at=datetime.utcnow() + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    )
    db.add(refresh_token)
    db.commit()
    db.refresh(refresh_token)
    return refresh_token

def issue_tokens(user: models.User, db: Session) -> dict:
    access_token = create_access_token(
        data={"sub": user.email},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    refresh_token = create_refresh_token_for_user(user.id, db)
    return {"access_token": access_token, "refresh_token": refresh_token.token, "token_type": "bearer"}

def authenticate_user(db: Session, email_or_username: str, password: str):
    # Try to find user by email first, then by username
    user = db.query(models.User).filter(models.User.email == email_or_username).first()
    if not user:
        user = db.query(models.User).filter(models.User.username == email_or_username).first()
    if not user:
        return False
    if not verify_password(password, user.hashed_password):
        return False
    return user

async def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email: str = payload.get("sub")
        if email is None:
            raise credentials_exception
        token_data = schemas.TokenData(email=email)
    except JWTError:
        raise credentials_exception
    user = db.query(models.User).filter(models.User.email == token_data.email).first()
    if user is None:
        raise credentials_exception
    return user
