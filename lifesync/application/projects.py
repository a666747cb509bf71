"""Projects (plain CRUD, soft delete)."""
from decimal import Decimal, InvalidOperation
from typing import List

from lifesync.application.base import SoftDeleteService
from lifesync.domain.enums import ProjectStatus
from lifesync.domain.errors import ValidationError
from lifesync.infrastructure.db.models import ProjectModel


class ProjectValidationError(ValidationError):
    pass


class ProjectService(SoftDeleteService[ProjectModel]):
    model = ProjectModel
    validation_error = ProjectValidationError
    required_fields = ("owner_id", "name")
    enum_fields = {"status": ProjectStatus}
    order_by = (ProjectModel.created_at.desc(),)

    def list_by_team(self, team_id: str) -> List[ProjectModel]:
        return self.list(team_id=team_id)

    def _validate(self, data, row):
        if data.get("progress") is not None:
            try:
                progress = Decimal(str(data["progress"]))
            except InvalidOperation:
                raise ProjectValidationError(f"Invalid progress: {data['progress']!r}") from None
            if not 0 <= progress <= 100:
                raise ProjectValidationError("Progress must be between 0 and 100")
            data["progress"] = progress

        start = data.get("start_date", row.start_date if row else None)
        end = data.get("end_date", row.end_date if row else None)
        if start and end and end < start:
            raise ProjectValidationError("end_date cannot precede start_date")
