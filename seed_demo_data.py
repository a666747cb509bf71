"""
Seed demo data into the database (users, friendships, a team, tasks, money).
Run:  python seed_demo_data.py
"""
import logging
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session

from lifesync.application.events import EventService
from lifesync.application.friends import FriendService
from lifesync.application.habits import HabitService
from lifesync.application.messages import MessageService
from lifesync.application.tasks import TaskService
from lifesync.application.teams import TeamService
from lifesync.application.transactions import TransactionService
from lifesync.application.users import UserService
from lifesync.infrastructure.db.session import session_scope

logger = logging.getLogger("seed")

AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"
DEMO_EMAIL = "max@lifesync.local"


def seed(db: Session) -> None:
    users = UserService(db)
    if users.get_by_email(DEMO_EMAIL):
        logger.info("Demo data already present (%s exists)", DEMO_EMAIL)
        return

    # ── users ────────────────────────────────────────────────────────
    max_ = users.create(email=DEMO_EMAIL, full_name="Max Mustermann", avatar_url=AVATAR_URL.format(seed="Max"))
    lena = users.create(email="lena@lifesync.local", full_name="Lena Schmidt", avatar_url=AVATAR_URL.format(seed="Lena"))
    tom = users.create(email="tom@lifesync.local", full_name="Tom Wagner", avatar_url=AVATAR_URL.format(seed="Tom"))
    anna = users.create(email="anna@lifesync.local", full_name="Anna Becker", avatar_url=AVATAR_URL.format(seed="Anna"))

    # ── friends ──────────────────────────────────────────────────────
    friends = FriendService(db)
    friends.accept_request(friends.send_request(max_.id, lena.id).id)
    friends.accept_request(friends.send_request(tom.id, max_.id).id)
    friends.send_request(anna.id, max_.id)

    # ── team ─────────────────────────────────────────────────────────
    teams = TeamService(db)
    alpha = teams.create(owner_id=max_.id, name="Projekt Alpha", description="🚀")
    teams.add_member(alpha.id, lena.id)

    # ── tasks ────────────────────────────────────────────────────────
    today = date.today()
    tasks = TaskService(db)
    tasks.create(owner_id=max_.id, title="Steuererklärung", category="Finanzen", priority="high",
                 due_date=today + timedelta(days=14))
    tasks.create(owner_id=max_.id, title="Blumen gießen", category="Haushalt", is_recurring=True, due_date=today)

    # ── habits ───────────────────────────────────────────────────────
    habits = HabitService(db)
    water = habits.create(owner_id=max_.id, name="Wasser trinken", category="Gesundheit",
                          start_date=today - timedelta(days=7), goal_value=8, goal_unit="Gläser")
    for offset in range(1, 6):
        habits.log(water.id, today - timedelta(days=offset), value=6 + offset % 3)

    # ── money ────────────────────────────────────────────────────────
    money = TransactionService(db)
    money.create(owner_id=max_.id, type="income", category="Gehalt", amount="3200", transaction_date=today.replace(day=1))
    money.create(owner_id=max_.id, type="expense", category="Lebensmittel", amount="84,37", transaction_date=today)
    money.create(owner_id=max_.id, type="expense", category="Miete", amount="950", transaction_date=today.replace(day=1))

    # ── calendar & chat ──────────────────────────────────────────────
    now = datetime.now(timezone.utc)
    EventService(db).create(owner_id=max_.id, team_id=alpha.id, title="Kickoff",
                            start_time=now + timedelta(days=1), end_time=now + timedelta(days=1, hours=1))
    chat = MessageService(db)
    chat.send(lena.id, max_.id, "Hey, wie gehts?")
    chat.send(max_.id, lena.id, "Gut, danke!")

    logger.info("Demo data seeded for %s", DEMO_EMAIL)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    with session_scope() as session:
        seed(session)
