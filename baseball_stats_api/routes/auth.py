"""Account routes: registration, login and the current-user lookup.

Registration is a multipart form so a profile picture can ride along with
the account fields. Login takes a JSON body. Both return a bearer token and
the public user record.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import Conflict, Unauthorized
from ..schemas import LoginRequest, user_out
from ..security import create_token, get_current_user, hash_password, verify_password
from ..uploads import discard_image, save_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    email: str = Form(..., min_length=3),
    password: str = Form(..., min_length=1),
    name: str = Form(..., min_length=1),
    profile_pic: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    """Create a user account.

    Emails are unique (case-insensitive). The check runs before the image is
    stored so a duplicate registration leaves nothing on disk; the unique
    index still decides concurrent registrations, and the loser gets the same
    409.

    Args:
        email: Login email.
        password: Plain-text password (hashed with bcrypt before storage).
        name: Display name.
        profile_pic: Optional image file (jpeg/png/gif, max 5 MiB).
        db: SQLAlchemy session (injected).

    Returns:
        dict: `{ "ok": true, "user": {...}, "token": "<jwt>" }`.

    Raises:
        Conflict: 409 if the email is already registered.
        UploadRejected: 413/415 for an invalid image.
    """
    email = _normalize_email(email)

    exists = db.execute(
        text("SELECT 1 FROM users WHERE email = :email"),
        {"email": email},
    ).first()
    if exists:
        raise Conflict("Email already exists")

    pic = save_image(profile_pic)
    try:
        user_id = db.execute(
            text("""
                INSERT INTO users (email, password_hash, name, profile_pic)
                VALUES (:email, :password_hash, :name, :profile_pic)
                RETURNING id
            """),
            {
                "email": email,
                "password_hash": hash_password(password),
                "name": name,
                "profile_pic": pic,
            },
        ).scalar_one()
        db.commit()
    except IntegrityError:
        db.rollback()
        discard_image(pic)
        raise Conflict("Email already exists")
    except SQLAlchemyError:
        db.rollback()
        discard_image(pic)
        raise

    logger.info("Registered user id=%s", user_id)
    user = {"id": user_id, "email": email, "name": name, "profile_pic": pic}
    return {
        "ok": True,
        "message": "User created successfully",
        "user": user_out(user),
        "token": create_token(user_id, email),
    }


@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email + password for a bearer token.

    Unknown emails and wrong passwords produce the same 401 so the endpoint
    does not reveal which accounts exist.

    Returns:
        dict: `{ "ok": true, "user": {...}, "token": "<jwt>" }`.
    """
    row = db.execute(
        text("SELECT * FROM users WHERE email = :email"),
        {"email": _normalize_email(body.email)},
    ).mappings().first()

    if not row or not verify_password(body.password, row["password_hash"]):
        logger.warning("Failed login for %s", _normalize_email(body.email))
        raise Unauthorized("Invalid credentials")

    return {
        "ok": True,
        "message": "Login successful",
        "user": user_out(row),
        "token": create_token(row["id"], row["email"]),
    }


@router.get("/me")
def me(user: dict = Depends(get_current_user)):
    """Return the authenticated user."""
    return {"ok": True, "user": user_out(user)}
