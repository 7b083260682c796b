"""JWT issuance and validation for dashboard sessions."""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Tuple

import jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.principal import UserPrincipal
from app.config import Settings
from app.models import AuthToken, User
from app.utils.dates import to_naive_utc, utcnow
from app.utils.db import active, soft_delete
from app.utils.exceptions import AuthenticationError
from app.utils.logger import logger

JWT_ALGORITHM = "HS256"


class TokenService:
    """
    Issues and checks session tokens.

    A token authenticates only while both hold: the JWT itself verifies
    (signature, issuer, expiry) and its auth_tokens row is still live and
    unexpired. Revoking the row therefore ends the session immediately.
    """

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def issue(self, user: User) -> Tuple[str, datetime]:
        """Sign a token for the user and persist it. Returns (token, expires_at)."""
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(minutes=self.settings.jwt_expires_minutes)
        claims = {
            "user_id": str(user.id),
            "email": user.email,
            "role": user.role,
            "sub": str(user.id),
            "iss": self.settings.jwt_issuer,
            "iat": now,
            "nbf": now,
            "exp": expires_at,
            "jti": uuid.uuid4().hex,
        }
        token = jwt.encode(claims, self.settings.jwt_secret, algorithm=JWT_ALGORITHM)

        self.db.add(AuthToken(
            id=uuid.uuid4(),
            user_id=user.id,
            token=token,
            expires_at=to_naive_utc(expires_at),
            last_used_at=to_naive_utc(now),
        ))
        self.db.commit()

        return token, to_naive_utc(expires_at)

    def decode(self, token: str) -> dict:
        try:
            return jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[JWT_ALGORITHM],
                issuer=self.settings.jwt_issuer,
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid or expired token")

    def validate(self, token: str) -> UserPrincipal:
        """Resolve a bearer token to a user principal or raise AuthenticationError."""
        self.decode(token)

        auth_token = active(self.db.query(AuthToken), AuthToken).filter(
            AuthToken.token == token,
        ).first()
        if not auth_token:
            raise AuthenticationError("Invalid token")

        now = utcnow()
        if auth_token.expires_at < now:
            raise AuthenticationError("Token expired")

        user = active(self.db.query(User), User).filter(User.id == auth_token.user_id).first()
        if not user:
            raise AuthenticationError("User not found")

        principal = UserPrincipal(user_id=user.id, role=user.role, email=user.email, token=token)
        self._touch(auth_token, now)
        return principal

    def _touch(self, auth_token: AuthToken, now: datetime) -> None:
        # Best-effort: a failed last-used update never fails the request
        try:
            auth_token.last_used_at = now
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Failed to update last_used_at for token {auth_token.id}: {e}")

    def revoke(self, token: str) -> bool:
        """Tombstone the token row. Returns False if it was already gone."""
        auth_token = active(self.db.query(AuthToken), AuthToken).filter(
            AuthToken.token == token,
        ).first()
        if not auth_token:
            return False
        soft_delete(auth_token)
        self.db.commit()
        return True

    def revoke_all(self, user_id: uuid.UUID) -> int:
        """Tombstone every live token of a user. The caller commits."""
        tokens = active(self.db.query(AuthToken), AuthToken).filter(
            AuthToken.user_id == user_id,
        ).all()
        for auth_token in tokens:
            soft_delete(auth_token)
        return len(tokens)
