import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt
import bcrypt
from sqlmodel import Session

from ..config import ACCESS_TOKEN_EXPIRE_MINUTES, SECRET_KEY
from ..database import get_db
from ..models import Account
from ..schemas.account import Account as AccountSchema, AccountCreate, AuthResponse, TokenData

logger = logging.getLogger(__name__)

router = APIRouter()

ALGORITHM = "HS256"


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:72]  # Truncate to 72 bytes (bcrypt limit)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    hashed_bytes = hashed_password.encode('utf-8') if isinstance(hashed_password, str) else hashed_password
    return bcrypt.checkpw(_password_bytes(plain_password), hashed_bytes)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt directly."""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(_password_bytes(password), salt)
    return hashed.decode('utf-8')


def authenticate_account(db: Session, address: str, password: str) -> Optional[Account]:
    """Authenticate an owner address."""
    account = db.get(Account, address)
    if not account:
        return None
    if not verify_password(password, account.hashed_password):
        return None
    return account


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def _get_token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get("token")


def _decode_token(token: str) -> Optional[TokenData]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        address: str = payload.get("sub")
        if not address:
            return None
        return TokenData(address=address)
    except JWTError:
        return None


def _issue_token(response: Response, account: Account) -> dict:
    access_token = create_access_token(data={"sub": account.address})
    response.set_cookie(
        key="token",
        value=access_token,
        httponly=True,
        secure=False,  # Set to True in production with HTTPS
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "account": account,
    }


async def get_current_account(
    request: Request,
    db: Session = Depends(get_db),
) -> Account:
    """Get current account from JWT token."""
    token = _get_token_from_request(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_data = _decode_token(token)
    if not token_data or not token_data.address:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    account = db.get(Account, token_data.address)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account not found",
        )
    return account


async def get_current_owner(account: Account = Depends(get_current_account)) -> str:
    """The caller identity every task operation is scoped to."""
    return account.address


@router.post("/signup", response_model=AuthResponse)
def signup(
    account: AccountCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """Register credentials for an owner address."""
    if db.get(Account, account.address):
        raise HTTPException(status_code=400, detail="Address already registered")

    db_account = Account(address=account.address, hashed_password=get_password_hash(account.password))
    db.add(db_account)
    db.commit()
    db.refresh(db_account)
    logger.info("Account registered address=%s", db_account.address)

    return _issue_token(response, db_account)


@router.post("/signin", response_model=AuthResponse)
def signin(
    account: AccountCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """Sign in and get JWT token."""
    db_account = authenticate_account(db, account.address, account.password)
    if not db_account:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect address or password",
        )

    return _issue_token(response, db_account)


@router.post("/signout")
async def signout(response: Response):
    """Sign out and clear session cookie."""
    response.delete_cookie(key="token")
    return {"success": True}


@router.get("/me", response_model=AccountSchema)
def read_account_me(current_account: Account = Depends(get_current_account)):
    """Get current account information."""
    return current_account
