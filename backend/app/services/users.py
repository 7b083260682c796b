"""User accounts: registration, credential checks and admin management."""
import uuid
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.tokens import TokenService
from app.constants import UserRole
from app.models import User
from app.utils.db import active, get_by_id, soft_delete
from app.utils.exceptions import AuthenticationError, ConflictError, ValidationError
from app.utils.hashing import hash_password, verify_password
from app.utils.logger import logger


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return active(self.db.query(User), User).filter(User.email == email).first()

    def register(self, email: str, password: str, name: str) -> User:
        """Create a developer account. Duplicate emails raise ConflictError."""
        # Soft-deleted accounts keep their email reserved
        if self.db.query(User).filter(User.email == email).first():
            raise ConflictError("Email already in use")

        user = User(
            id=uuid.uuid4(),
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=UserRole.DEVELOPER.value,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent registration with the same email
            self.db.rollback()
            raise ConflictError("Email already in use")

        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.find_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        return user

    def update_profile(self, user: User, name: Optional[str] = None, password: Optional[str] = None) -> User:
        if name is not None:
            user.name = name
        if password is not None:
            user.password_hash = hash_password(password)
        self.db.commit()
        self.db.refresh(user)
        return user

    def list_users(self) -> List[User]:
        return active(self.db.query(User), User).order_by(User.created_at.asc()).all()

    def get(self, user_id: str | uuid.UUID) -> User:
        return get_by_id(self.db, User, user_id, "User")

    def set_role(self, acting_user_id: uuid.UUID, user_id: str | uuid.UUID, role: UserRole) -> User:
        user = self.get(user_id)
        if user.id == acting_user_id and role != UserRole.ADMIN:
            raise ValidationError("Admins cannot demote themselves")
        user.role = role.value
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User {user.id} role set to {role.value} by {acting_user_id}")
        return user

    def delete(self, acting_user_id: uuid.UUID, user_id: str | uuid.UUID, tokens: TokenService) -> None:
        """Soft-delete a user and revoke every session they hold."""
        user = self.get(user_id)
        if user.id == acting_user_id:
            raise ValidationError("Admins cannot delete themselves")
        soft_delete(user)
        revoked = tokens.revoke_all(user.id)
        self.db.commit()
        logger.info(f"Deleted user {user.id} and revoked {revoked} tokens")
