"""Tests for joining, editing and withdrawing from races."""

from __future__ import annotations

import unittest

from mockfirestore import MockFirestore

from runbike.core.constants import ROLE_ADMIN, ROLE_GUEST, ROLE_MEMBER
from runbike.core.session import Session
from runbike.errors import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from runbike.races.services import (
    AVAILABLE,
    EDIT,
    ENDED,
    JOIN,
    REGISTERED,
    WITHDRAW,
    RegistrationService,
    check_transition,
    classification_for,
    classify_roster,
)
from runbike.store import RecordStore
from tests.conftest import patch_mockfirestore
from tests.helpers import TEAM_ID, TODAY, seed


class TestCheckTransition(unittest.TestCase):
    def test_allowed(self):
        check_transition(JOIN, AVAILABLE)
        check_transition(EDIT, REGISTERED)
        check_transition(EDIT, ENDED)
        check_transition(WITHDRAW, REGISTERED)
        check_transition(WITHDRAW, ENDED)

    def test_rejected(self):
        for action, status in [
            (JOIN, REGISTERED),
            (JOIN, ENDED),
            (JOIN, None),
            (EDIT, AVAILABLE),
            (WITHDRAW, AVAILABLE),
            (WITHDRAW, None),
        ]:
            with self.subTest(action=action, status=status):
                with self.assertRaises(InvalidTransitionError) as ctx:
                    check_transition(action, status)
                self.assertEqual(ctx.exception.action, action)
                self.assertEqual(ctx.exception.status, status)
                self.assertEqual(ctx.exception.status_code, 409)

    def test_unknown_action(self):
        with self.assertRaises(ValueError):
            check_transition("teleport", AVAILABLE)


class TestRegistrationService(unittest.TestCase):
    def setUp(self) -> None:
        patch_mockfirestore()
        self.db = MockFirestore()
        seed(self.db, "people", "a", {"name": "Alice"})
        seed(self.db, "people", "b", {"name": "Bob"})
        seed(self.db, "people", "h", {"name": "Hana", "isHidden": True})
        seed(self.db, "raceEvents", "future", {"date": "2024-07-01", "name": "Run"})
        seed(self.db, "raceEvents", "past", {"date": "2024-05-01", "name": "Dash"})
        self.admin = Session.start(ROLE_ADMIN, 60)

    def _status(self, person_id, event_id):
        roster = classify_roster(
            person_id,
            RecordStore.list_race_events(self.db, TEAM_ID),
            RecordStore.list_race_attempts(self.db, TEAM_ID),
            TODAY,
        )
        return classification_for(roster, event_id)

    def test_join_edit_withdraw(self):
        attempt_id = RegistrationService.join(
            self.db, TEAM_ID, self.admin, "a", "future", TODAY, note="excited"
        )
        self.assertEqual(self._status("a", "future"), REGISTERED)

        edited_id = RegistrationService.edit(
            self.db, TEAM_ID, self.admin, "a", "future", TODAY, note="new bike"
        )
        self.assertEqual(edited_id, attempt_id)
        attempt = RecordStore.list_race_attempts(self.db, TEAM_ID)[0]
        self.assertEqual(attempt.note, "new bike")

        RegistrationService.withdraw(self.db, TEAM_ID, self.admin, "a", "future", TODAY)
        self.assertEqual(self._status("a", "future"), AVAILABLE)
        self.assertEqual(RecordStore.list_race_attempts(self.db, TEAM_ID), [])

    def test_double_join_is_rejected(self):
        RegistrationService.join(self.db, TEAM_ID, self.admin, "a", "future", TODAY)

        with self.assertRaises(InvalidTransitionError):
            RegistrationService.join(self.db, TEAM_ID, self.admin, "a", "future", TODAY)
        self.assertEqual(len(RecordStore.list_race_attempts(self.db, TEAM_ID)), 1)

    def test_cannot_join_a_past_race(self):
        with self.assertRaises(InvalidTransitionError):
            RegistrationService.join(self.db, TEAM_ID, self.admin, "a", "past", TODAY)

    def test_cannot_edit_or_withdraw_without_entry(self):
        with self.assertRaises(InvalidTransitionError):
            RegistrationService.edit(self.db, TEAM_ID, self.admin, "a", "future", TODAY)
        with self.assertRaises(InvalidTransitionError):
            RegistrationService.withdraw(
                self.db, TEAM_ID, self.admin, "a", "future", TODAY
            )

    def test_ended_race_needs_a_result(self):
        seed(self.db, "raceAttempts", "r1", {"eventId": "past", "personId": "a"})

        with self.assertRaises(ValidationError):
            RegistrationService.edit(
                self.db, TEAM_ID, self.admin, "a", "past", TODAY, result="  "
            )
        RegistrationService.edit(
            self.db, TEAM_ID, self.admin, "a", "past", TODAY, result="1st"
        )
        attempt = RecordStore.list_race_attempts(self.db, TEAM_ID)[0]
        self.assertEqual(attempt.result, "1st")

    def test_edit_keeps_picture_unless_replaced(self):
        seed(
            self.db,
            "raceAttempts",
            "r1",
            {"eventId": "future", "personId": "a", "personalImage": "me.jpg"},
        )

        RegistrationService.edit(self.db, TEAM_ID, self.admin, "a", "future", TODAY)
        self.assertEqual(
            RecordStore.list_race_attempts(self.db, TEAM_ID)[0].personal_image, "me.jpg"
        )
        RegistrationService.edit(
            self.db, TEAM_ID, self.admin, "a", "future", TODAY, personal_image=""
        )
        self.assertEqual(
            RecordStore.list_race_attempts(self.db, TEAM_ID)[0].personal_image, ""
        )

    def test_members_act_only_for_themselves(self):
        member = Session.start(ROLE_MEMBER, 60, person_id="a")
        guest = Session.start(ROLE_GUEST, 60)

        RegistrationService.join(self.db, TEAM_ID, member, "a", "future", TODAY)
        with self.assertRaises(ForbiddenError):
            RegistrationService.join(self.db, TEAM_ID, member, "b", "future", TODAY)
        RegistrationService.join(self.db, TEAM_ID, guest, "b", "future", TODAY)

    def test_unknown_or_retired_targets(self):
        with self.assertRaises(NotFoundError):
            RegistrationService.join(self.db, TEAM_ID, self.admin, "h", "future", TODAY)
        with self.assertRaises(NotFoundError):
            RegistrationService.join(self.db, TEAM_ID, self.admin, "z", "future", TODAY)
        with self.assertRaises(NotFoundError):
            RegistrationService.join(self.db, TEAM_ID, self.admin, "a", "nope", TODAY)


if __name__ == "__main__":
    unittest.main()
