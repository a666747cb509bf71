"""User profiles (plain CRUD, soft delete)."""
from typing import List, Optional

from sqlalchemy import or_

from lifesync.application.base import SoftDeleteService, escape_like
from lifesync.domain.enums import Theme
from lifesync.domain.errors import ValidationError
from lifesync.infrastructure.db.models import User


class UserValidationError(ValidationError):
    pass


class UserService(SoftDeleteService[User]):
    model = User
    validation_error = UserValidationError
    required_fields = ("email", "full_name")
    enum_fields = {"theme": Theme}

    def get_profile(self, user_id: str) -> Optional[User]:
        return self.get_by_id(user_id)

    def update_profile(self, user_id: str, **changes) -> User:
        return self.update(user_id, **changes)

    def get_by_email(self, email: str) -> Optional[User]:
        with self._store_errors("get"):
            return self._query().filter(User.email == email.strip().lower()).first()

    def search(self, query: str) -> List[User]:
        """Case-insensitive substring match on full name or email."""
        pattern = f"%{escape_like(query.strip())}%"
        return self._all(
            self._query().filter(or_(
                User.full_name.ilike(pattern, escape="\\"),
                User.email.ilike(pattern, escape="\\"),
            )).order_by(User.full_name)
        )

    def _validate(self, data, row):
        if "email" in data:
            email = data["email"].lower()
            if "@" not in email:
                raise UserValidationError(f"Invalid email: {email}")
            data["email"] = email
