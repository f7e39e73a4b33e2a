# Overview: Service-layer operations for admin accounts; password hashing and credential checks.

"""
Admin account service.

Accounts are created from the CLI only; the public API has no registration
endpoint. Passwords are bcrypt-hashed (cost BCRYPT_ROUNDS) after passing
PASSWORD_RULES. Session tokens live in session_service.py.
"""

import re

import bcrypt

from ..extensions import db
from ..models import User
from ..time_utils import utcnow

BCRYPT_ROUNDS = 12
MIN_PASSWORD_LENGTH = 8

# (pattern, what is missing)
PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "an uppercase letter"),
    (re.compile(r"[a-z]"), "a lowercase letter"),
    (re.compile(r"\d"), "a digit"),
    (re.compile(r"[!@#$%^&*(),.'\":{}|<>_\-]"), "a special character"),
)


class PasswordValidationError(Exception):
    """Password fails one of the strength rules."""


def validate_password_strength(password: str) -> None:
    """Raise PasswordValidationError naming the first rule the password breaks."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    for pattern, requirement in PASSWORD_RULES:
        if not pattern.search(password):
            raise PasswordValidationError(f"Password must contain {requirement}")


def hash_password(password: str) -> str:
    validate_password_strength(password)
    digest = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return digest.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Timing-safe bcrypt comparison.

    A stored value that is not a bcrypt hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_user(username: str, email: str, password: str, role: str = "ADMIN") -> User:
    """
    Create an admin account.

    Raises:
        ValueError: username or email taken
        PasswordValidationError: weak password
    """
    taken = db.session.query(User.id).filter(
        (User.username == username) | (User.email == email)
    ).first()
    if taken:
        raise ValueError("Username or email already exists")

    account = User(username=username, email=email, password_hash=hash_password(password), role=role)
    db.session.add(account)
    db.session.commit()
    return account


def set_password(user: User, password: str) -> None:
    user.password_hash = hash_password(password)
    db.session.commit()


def authenticate(login: str, password: str) -> User | None:
    """
    Match `login` against username or email among active accounts.

    On success stamps last_login_at and returns the User.
    """
    account = (
        db.session.query(User)
        .filter((User.username == login) | (User.email == login))
        .filter(User.is_active.is_(True))
        .first()
    )
    if account is None or not verify_password(password, account.password_hash):
        return None

    account.last_login_at = utcnow()
    db.session.commit()
    return account
