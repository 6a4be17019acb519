"""Record builders and a route test base shared by the test suites."""

import datetime
import unittest
from unittest.mock import MagicMock, patch

from mockfirestore import MockFirestore

from runbike import create_app
from runbike.core.constants import SESSION_COOKIE_KEY
from runbike.core.models import Person, RaceAttempt, RaceEvent, TrainingAttempt
from runbike.core.session import Session
from tests.conftest import patch_mockfirestore

TEAM_ID = "team1"
TODAY = datetime.date(2024, 6, 1)


def day(text):
    return datetime.date.fromisoformat(text)


def make_person(pid, name=None, birthday=None, hidden=False):
    return Person(
        id=pid,
        name=name or pid.upper(),
        birthday=day(birthday) if birthday else None,
        hidden=hidden,
    )


def make_attempt(aid, date, person_id, value, type_name="50m Sprint"):
    return TrainingAttempt(
        id=str(aid),
        date=day(date),
        person_id=person_id,
        type_name=type_name,
        value=value,
    )


def make_event(eid, date, name=None, series_name="Spring Cup", public_image=""):
    return RaceEvent(
        id=str(eid),
        date=day(date),
        name=name or f"Race {eid}",
        series_id="s1",
        series_name=series_name,
        public_image=public_image,
    )


def make_race_attempt(aid, event_id, person_id, result="", personal_image=""):
    return RaceAttempt(
        id=str(aid),
        event_id=str(event_id),
        person_id=person_id,
        result=result,
        personal_image=personal_image,
    )


def seed(db, collection, doc_id, data):
    """Write a team-scoped document into a MockFirestore instance."""
    payload = {"teamId": TEAM_ID}
    payload.update(data)
    db.collection(collection).document(doc_id).set(payload)


class RouteTestCase(unittest.TestCase):
    """Flask test client wired to an in-memory Firestore."""

    BLUEPRINTS = ("auth", "dashboard", "training", "races", "people")

    def setUp(self):
        patch_mockfirestore()
        self.db = MockFirestore()
        self.mock_firestore_service = MagicMock()
        self.mock_firestore_service.client.return_value = self.db

        patchers = [
            patch(f"runbike.{name}.routes.firestore", new=self.mock_firestore_service)
            for name in self.BLUEPRINTS
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

        self.app = create_app(
            {
                "TESTING": True,
                "WTF_CSRF_ENABLED": False,
                "TEAM_ID": TEAM_ID,
                "ADMIN_PASSWORD": "letmein",
            }
        )
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()

    def tearDown(self):
        self.app_context.pop()

    def login_as(self, role, person_id=None):
        with self.client.session_transaction() as sess:
            sess[SESSION_COOKIE_KEY] = Session.start(role, 600, person_id).to_cookie()
