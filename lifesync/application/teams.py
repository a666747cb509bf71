"""Teams and team membership."""
import logging
from typing import List

from sqlalchemy import select

from lifesync.application.base import RecordService, SoftDeleteService
from lifesync.domain.enums import TeamRole, parse_enum
from lifesync.domain.errors import NotFoundError, ValidationError
from lifesync.infrastructure.db.models import TeamModel, TeamMemberModel

logger = logging.getLogger(__name__)


class TeamValidationError(ValidationError):
    pass


class TeamMemberService(RecordService[TeamMemberModel]):
    """Join rows; removal is a hard delete"""
    model = TeamMemberModel
    validation_error = TeamValidationError
    required_fields = ("team_id", "user_id")
    enum_fields = {"role": TeamRole}
    immutable_fields = frozenset({"id", "created_at", "team_id", "user_id", "joined_at"})
    order_by = (TeamMemberModel.joined_at,)


class TeamService(SoftDeleteService[TeamModel]):
    model = TeamModel
    validation_error = TeamValidationError
    required_fields = ("owner_id", "name")
    order_by = (TeamModel.created_at.desc(),)

    def __init__(self, db):
        super().__init__(db)
        self.members = TeamMemberService(db)

    def create(self, **payload) -> TeamModel:
        """Create the team and enrol its owner with the owner role, in one commit."""
        data = self._clean(payload, row=None)
        team = TeamModel(**data)
        with self._store_errors("create"):
            self.db.add(team)
            self.db.flush()
            self.db.add(TeamMemberModel(team_id=team.id, user_id=team.owner_id, role=TeamRole.OWNER.value))
            self.db.commit()
        logger.info("Created team %s owned by %s", team.id, team.owner_id)
        return team

    def list_members(self, team_id: str) -> List[TeamMemberModel]:
        return self.members.list(team_id=team_id)

    def add_member(self, team_id: str, user_id: str, role=TeamRole.MEMBER) -> TeamMemberModel:
        if self.get_by_id(team_id) is None:
            raise NotFoundError(f"team {team_id} not found")
        existing = self.members.list(team_id=team_id, user_id=user_id)
        if existing:
            raise TeamValidationError(f"User {user_id} is already a member of team {team_id}")
        return self.members.create(team_id=team_id, user_id=user_id, role=role)

    def update_member(self, member_id: str, **changes) -> TeamMemberModel:
        return self.members.update(member_id, **changes)

    def remove_member(self, team_id: str, user_id: str) -> None:
        removed = self.members._hard_delete(
            TeamMemberModel.team_id == team_id,
            TeamMemberModel.user_id == user_id,
        )
        if removed:
            logger.info("Removed user %s from team %s", user_id, team_id)

    def list_user_teams(self, user_id: str) -> List[TeamModel]:
        """Live teams the user belongs to."""
        team_ids = select(TeamMemberModel.team_id).where(
            TeamMemberModel.user_id == user_id,
        )
        return self._all(
            self._query().filter(TeamModel.id.in_(team_ids)).order_by(*self.order_by)
        )

    def member_role(self, team_id: str, user_id: str) -> TeamRole | None:
        rows = self.members.list(team_id=team_id, user_id=user_id)
        return parse_enum(TeamRole, rows[0].role, "role") if rows else None
