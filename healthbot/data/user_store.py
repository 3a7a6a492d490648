"""Credential stores: where user records live.

Two interchangeable backends behind one interface:

- ``SQLUserStore``: relational database through SQLAlchemy (Postgres/Supabase
  in production, SQLite locally). Email uniqueness is a unique index.
- ``MemoryUserStore``: process-local list, lost on restart.

``build_user_store`` picks one at startup; callers never branch on the backend.
"""
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..app.errors import BackendUnavailable, DuplicateEmail
from ..schemas.user_models import UserRecord
from ..utils.logger import get_logger
from ..utils.security import mask_email
from .database import create_db_engine, create_tables, make_session_factory
from .models import User

logger = get_logger()

UPDATABLE_FIELDS = {"full_name", "email", "password_hash"}


def _check_fields(fields: Dict[str, Any]) -> None:
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update user fields: {sorted(unknown)}")


class UserStore(ABC):
    """Interface every credential store implements."""

    backend: str = "base"

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def insert(self, full_name: str, email: str, password_hash: str) -> UserRecord:
        """Create a user. Raises DuplicateEmail if the email is taken."""
        ...

    @abstractmethod
    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[UserRecord]:
        """Apply ``fields`` and return the updated record, or None if the id is unknown."""
        ...


class MemoryUserStore(UserStore):
    """In-process fallback store.

    There is no lock: two concurrent signups for one email can both pass the
    existence check. Acceptable for a single-process demo deployment.
    """

    backend = "memory"

    def __init__(self):
        self._users: List[UserRecord] = []
        self._last_id = 0

    def _next_id(self) -> str:
        # Millisecond timestamp, bumped so two signups in the same ms differ
        now_ms = int(time.time() * 1000)
        self._last_id = max(now_ms, self._last_id + 1)
        return str(self._last_id)

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        for user in self._users:
            if user.email == email:
                return user.model_copy()
        return None

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        for user in self._users:
            if user.id == user_id:
                return user.model_copy()
        return None

    def insert(self, full_name: str, email: str, password_hash: str) -> UserRecord:
        if self.find_by_email(email):
            raise DuplicateEmail()

        now = datetime.now(timezone.utc)
        user = UserRecord(
            id=self._next_id(),
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        self._users.append(user)
        logger.info(f"[USER_STORE] memory insert id={user.id} email={mask_email(email)}")
        return user.model_copy()

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[UserRecord]:
        _check_fields(fields)
        for index, user in enumerate(self._users):
            if user.id == user_id:
                owner = self.find_by_email(fields["email"]) if "email" in fields else None
                if owner is not None and owner.id != user_id:
                    raise DuplicateEmail()
                updated = user.model_copy(update={**fields, "updated_at": datetime.now(timezone.utc)})
                self._users[index] = updated
                return updated.model_copy()
        return None


class SQLUserStore(UserStore):
    """SQLAlchemy-backed store for the ``users`` table."""

    backend = "sql"

    def __init__(self, database_url: Optional[str] = None, engine=None):
        self.engine = engine if engine is not None else create_db_engine(database_url)
        self.SessionLocal = make_session_factory(self.engine)
        try:
            create_tables(self.engine)
        except SQLAlchemyError as e:
            # Keep serving; every call will surface BackendUnavailable until the DB is back
            logger.error(f"[USER_STORE] Could not prepare users table: {e}")

    @contextmanager
    def _session(self):
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise DuplicateEmail(detail=str(e.orig)) from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"[USER_STORE] Database error: {e}")
            raise BackendUnavailable(detail=str(e)) from e
        finally:
            db.close()

    @staticmethod
    def _to_record(row: User) -> UserRecord:
        return UserRecord(
            id=str(row.id),
            full_name=row.full_name,
            email=row.email,
            password_hash=row.password_hash,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        with self._session() as db:
            row = db.query(User).filter(User.email == email).first()
            return self._to_record(row) if row else None

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        with self._session() as db:
            row = db.get(User, user_id)
            return self._to_record(row) if row else None

    def insert(self, full_name: str, email: str, password_hash: str) -> UserRecord:
        with self._session() as db:
            # Friendly early answer; the unique index still guards the race
            if db.query(User.id).filter(User.email == email).first():
                raise DuplicateEmail()
            row = User(full_name=full_name, email=email, password_hash=password_hash)
            db.add(row)
            db.flush()
            db.refresh(row)
            record = self._to_record(row)
        logger.info(f"[USER_STORE] sql insert id={record.id} email={mask_email(email)}")
        return record

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[UserRecord]:
        _check_fields(fields)
        with self._session() as db:
            row = db.get(User, user_id)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, value)
            row.updated_at = datetime.now(timezone.utc)
            db.flush()
            db.refresh(row)
            return self._to_record(row)


def build_user_store(database_url: Optional[str] = None) -> UserStore:
    """Pick the credential store once, at startup."""
    if database_url:
        logger.info("[USER_STORE] Using SQL user store")
        return SQLUserStore(database_url)
    logger.warning(
        "[USER_STORE] DATABASE_URL not configured. Using fallback in-memory user storage."
    )
    return MemoryUserStore()
