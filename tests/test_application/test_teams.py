"""Tests for TeamService and membership"""
import pytest
from sqlalchemy.exc import OperationalError

from lifesync.application.teams import TeamService, TeamValidationError
from lifesync.domain.enums import TeamRole
from lifesync.domain.errors import NotFoundError, StoreError
from lifesync.infrastructure.db.models import TeamMemberModel


@pytest.fixture
def service(db_session):
    return TeamService(db_session)


@pytest.fixture
def team(service, sample_user_id):
    return service.create(owner_id=sample_user_id, name="Projekt Alpha")


class TestTeams:
    def test_owner_is_enrolled(self, service, team, sample_user_id):
        members = service.list_members(team.id)
        assert [(m.user_id, m.role) for m in members] == [(sample_user_id, "owner")]
        assert service.member_role(team.id, sample_user_id) is TeamRole.OWNER

    def test_add_member(self, service, team, other_user_id):
        member = service.add_member(team.id, other_user_id)
        assert member.role == "member"
        assert len(service.list_members(team.id)) == 2

    def test_duplicate_member_rejected(self, service, team, other_user_id):
        service.add_member(team.id, other_user_id)
        with pytest.raises(TeamValidationError):
            service.add_member(team.id, other_user_id)

    def test_add_member_to_unknown_team(self, service, other_user_id):
        with pytest.raises(NotFoundError):
            service.add_member("missing", other_user_id)

    def test_unknown_role(self, service, team, other_user_id):
        with pytest.raises(TeamValidationError, match="role"):
            service.add_member(team.id, other_user_id, role="guest")

    def test_update_member_role(self, service, team, other_user_id):
        member = service.add_member(team.id, other_user_id)
        service.update_member(member.id, role=TeamRole.ADMIN)
        assert service.member_role(team.id, other_user_id) is TeamRole.ADMIN

    def test_remove_member_is_hard_delete(self, service, team, other_user_id):
        service.add_member(team.id, other_user_id)
        service.remove_member(team.id, other_user_id)
        assert service.member_role(team.id, other_user_id) is None

    def test_user_teams_skip_deleted(self, service, team, sample_user_id):
        other = service.create(owner_id=sample_user_id, name="Wochenendtrip")
        service.soft_delete(team.id)

        assert [t.id for t in service.list_user_teams(sample_user_id)] == [other.id]


class TestTeamCreateUnitOfWork:
    def test_failed_commit_leaves_no_team_and_no_member(self, service, db_session, sample_user_id, monkeypatch):
        def _failing_commit():
            raise OperationalError("COMMIT", {}, Exception("connection lost"))

        monkeypatch.setattr(db_session, "commit", _failing_commit)
        with pytest.raises(StoreError):
            service.create(owner_id=sample_user_id, name="Projekt Beta")
        monkeypatch.undo()

        assert service.list() == []
        assert db_session.query(TeamMemberModel).count() == 0

    def test_member_keys_fixed_after_create(self, service, team, sample_user_id, other_user_id):
        owner = service.list_members(team.id)[0]
        with pytest.raises(TeamValidationError):
            service.update_member(owner.id, user_id=other_user_id)
        assert service.update_member(owner.id, role=TeamRole.ADMIN).role == "admin"
