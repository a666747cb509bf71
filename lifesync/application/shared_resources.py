"""
Sharing grants on calendars, projects and tasks.

A grant targets exactly one grantee: a single user or a whole team.
"""
import logging
from typing import List, Optional

from sqlalchemy import or_, select

from lifesync.application.base import RecordService
from lifesync.domain.enums import Permission, ResourceType
from lifesync.domain.errors import ValidationError
from lifesync.infrastructure.db.models import SharedResourceModel, TeamMemberModel

logger = logging.getLogger(__name__)


class SharedResourceValidationError(ValidationError):
    pass


class SharedResourceService(RecordService[SharedResourceModel]):
    model = SharedResourceModel
    validation_error = SharedResourceValidationError
    required_fields = ("owner_id", "resource_type", "resource_id")
    enum_fields = {"resource_type": ResourceType, "permission": Permission}
    immutable_fields = frozenset({
        "id", "created_at", "owner_id", "resource_type", "resource_id",
        "shared_with_user_id", "shared_with_team_id",
    })
    order_by = (SharedResourceModel.created_at.desc(),)

    def share(
        self,
        owner_id: str,
        resource_type,
        resource_id: str,
        permission=Permission.VIEW,
        user_id: Optional[str] = None,
        team_id: Optional[str] = None,
    ) -> SharedResourceModel:
        if (user_id is None) == (team_id is None):
            raise SharedResourceValidationError("Share with exactly one user or one team")
        data = self._clean(
            {
                "owner_id": owner_id,
                "resource_type": resource_type,
                "resource_id": resource_id,
                "permission": permission,
            },
            row=None,
        )
        row = SharedResourceModel(**data, shared_with_user_id=user_id, shared_with_team_id=team_id)
        with self._store_errors("create"):
            self.db.add(row)
            self.db.commit()
        logger.info(
            "Shared %s %s with %s", data["resource_type"], resource_id,
            f"user {user_id}" if user_id else f"team {team_id}",
        )
        return row

    def list_for_resource(self, resource_type, resource_id: str) -> List[SharedResourceModel]:
        return self.list(resource_type=resource_type, resource_id=resource_id)

    def list_shared_with_user(self, user_id: str) -> List[SharedResourceModel]:
        """Grants to the user directly or to any team the user belongs to."""
        user_teams = select(TeamMemberModel.team_id).where(TeamMemberModel.user_id == user_id)
        return self._all(
            self._query().filter(or_(
                SharedResourceModel.shared_with_user_id == user_id,
                SharedResourceModel.shared_with_team_id.in_(user_teams),
            )).order_by(*self.order_by)
        )

    def update_permission(self, share_id: str, permission) -> SharedResourceModel:
        return self.update(share_id, permission=permission)

    def revoke(self, share_id: str) -> None:
        if self._hard_delete(SharedResourceModel.id == share_id):
            logger.info("Revoked share %s", share_id)
