"""
studypass.api.deps — FastAPI dependency injection
===================================================
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, status
from jwt.exceptions import InvalidTokenError
from sqlalchemy import Engine

from studypass.config import StudyPassConfig, load_config
from studypass.database.engine import create_db_engine, init_db

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

# Placeholders that ship in docs and .env templates
_PLACEHOLDER_SECRETS = frozenset({
    "studypass-dev-secret-change-me",
    "change-me",
    "changeme",
    "secret",
})
_MIN_SECRET_LENGTH = 32


def check_jwt_secret(secret: str | None) -> str:
    """Return *secret* if it is fit to sign admin tokens for the award API.

    Admin tokens are the only thing standing between the internet and
    ``POST /api/admin/award``, so a blank, placeholder or short key stops
    the API from starting.

    Raises
    ------
    RuntimeError
        Naming what is wrong with the key.
    """
    secret = (secret or "").strip()
    if not secret:
        raise RuntimeError(
            "JWT_SECRET is empty; the StudyPass admin API cannot sign tokens. "
            "Set it in .env (see .env.example)."
        )
    if secret.lower() in _PLACEHOLDER_SECRETS:
        raise RuntimeError(
            f"JWT_SECRET is still the placeholder {secret!r}; replace it before "
            "starting the StudyPass API."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET has {len(secret)} characters; admin tokens need at "
            f"least {_MIN_SECRET_LENGTH}."
        )
    return secret


JWT_SECRET: str = check_jwt_secret(os.getenv("JWT_SECRET"))


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    engine = create_db_engine()
    init_db(engine)
    return engine


@lru_cache(maxsize=1)
def get_config() -> StudyPassConfig:
    path = Path(os.getenv("STUDYPASS_CONFIG", "config.yaml"))
    if not path.exists():
        logger.warning("%s not found — using built-in defaults", path)
        return StudyPassConfig(app_name="StudyPass", api_port=8000)
    return load_config(path)


def get_current_admin(
    authorization: Annotated[str | None, Header()] = None,
) -> dict:
    """Decode the ``Authorization: Bearer <jwt>`` header of an award request.

    401 when the header is missing or the token does not verify, 403 when
    the token is valid but lacks the ``is_admin`` claim.
    """
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Missing bearer token")
    try:
        claims = jwt.decode(token.strip(), JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except InvalidTokenError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token")
    if claims.get("is_admin") is not True:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Admin role required")
    return claims


AdminDep = Annotated[dict, Depends(get_current_admin)]
EngineDep = Annotated[Engine, Depends(get_engine)]
ConfigDep = Annotated[StudyPassConfig, Depends(get_config)]
