"""Arithmetic challenge shown on the login and registration forms.

The question goes to the browser in clear text; the answer only travels as a
bcrypt hash inside a signed, short-lived token, so no server state is kept.
"""
from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel

from periodlog.config import settings
from periodlog.exceptions import InvalidInputError

CHALLENGE_FAILED = "Incorrect math answer. Please try again."

_OPERATIONS = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
}


class Challenge(BaseModel):
    question: str
    token: str


def _hash_answer(answer: int) -> str:
    return bcrypt.hashpw(str(answer).encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def new_challenge(rng: Optional[random.Random] = None) -> Challenge:
    rng = rng or random.SystemRandom()
    a, b = rng.randint(1, 10), rng.randint(1, 10)
    operator = rng.choice(list(_OPERATIONS))
    answer = _OPERATIONS[operator](a, b)
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.challenge_expire_minutes)
    token = jwt.encode(
        {"type": "challenge", "answer": _hash_answer(answer), "exp": expire},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return Challenge(question=f"{a} {operator} {b}", token=token)


def verify_challenge(token: str, answer) -> None:
    """Raise InvalidInputError unless ``answer`` solves the challenge in ``token``."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise InvalidInputError(CHALLENGE_FAILED) from None
    if payload.get("type") != "challenge" or not payload.get("answer"):
        raise InvalidInputError(CHALLENGE_FAILED)

    try:
        given = int(str(answer).strip())
    except ValueError:
        raise InvalidInputError(CHALLENGE_FAILED) from None
    if not bcrypt.checkpw(str(given).encode("utf-8"), payload["answer"].encode("utf-8")):
        raise InvalidInputError(CHALLENGE_FAILED)
