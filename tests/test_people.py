"""Tests for the people blueprint."""

import unittest

from werkzeug.security import check_password_hash

from runbike.core.constants import ROLE_ADMIN, ROLE_GUEST, ROLE_MEMBER
from tests.helpers import RouteTestCase, seed


class TestPeopleRoutes(RouteTestCase):
    def setUp(self):
        super().setUp()
        seed(
            self.db,
            "people",
            "a",
            {"name": "Alice", "smallImage": "a.jpg#z=2&x=40&y=60"},
        )
        seed(self.db, "people", "h", {"name": "Hana", "isHidden": True})

    def test_only_admin_sees_retired_people(self):
        self.login_as(ROLE_GUEST)
        people = self.client.get("/people/").get_json()["people"]
        self.assertEqual([p["id"] for p in people], ["a"])
        frame = people[0]["small_image"]
        self.assertEqual(frame["ref"], "a.jpg")
        self.assertEqual(frame["scale"], 2)
        self.assertEqual(frame["translate_x"], -15)

        self.login_as(ROLE_ADMIN)
        people = self.client.get("/people/").get_json()["people"]
        self.assertEqual([p["id"] for p in people], ["a", "h"])

    def test_add_person(self):
        self.login_as(ROLE_ADMIN)

        response = self.client.post(
            "/people/",
            data={"name": "Bob", "birthday": "2019-06-01", "password": "pedal1"},
        )

        self.assertEqual(response.status_code, 201)
        stored = self.db.collection("people").document(response.get_json()["id"])
        data = stored.get().to_dict()
        self.assertEqual(data["birthday"], "2019-06-01")
        self.assertFalse(data["isHidden"])
        self.assertTrue(check_password_hash(data["passwordHash"], "pedal1"))

    def test_guest_cannot_add_person(self):
        self.login_as(ROLE_GUEST)

        response = self.client.post("/people/", data={"name": "Bob"})

        self.assertEqual(response.status_code, 403)

    def test_member_edits_own_profile_only(self):
        self.login_as(ROLE_MEMBER, person_id="a")

        response = self.client.post("/people/a", data={"name": "Ali", "motto": "Go"})
        self.assertEqual(response.status_code, 200)
        data = self.db.collection("people").document("a").get().to_dict()
        self.assertEqual(data["name"], "Ali")
        self.assertEqual(data["motto"], "Go")

        response = self.client.post("/people/h", data={"name": "Nope"})
        self.assertEqual(response.status_code, 403)

    def test_toggle_hidden(self):
        self.login_as(ROLE_ADMIN)

        response = self.client.post("/people/h/hidden", data={"hidden": ""})

        self.assertEqual(response.status_code, 200)
        self.assertFalse(
            self.db.collection("people").document("h").get().to_dict()["isHidden"]
        )
        self.client.post("/people/a/hidden", data={"hidden": "y"})
        self.assertTrue(
            self.db.collection("people").document("a").get().to_dict()["isHidden"]
        )

    def test_training_types_and_series(self):
        self.login_as(ROLE_ADMIN)

        created = self.client.post(
            "/people/training-types", data={"name": "50m Sprint", "is_default": "y"}
        )
        self.assertEqual(created.status_code, 201)
        duplicate = self.client.post(
            "/people/training-types", data={"name": "50m Sprint"}
        )
        self.assertEqual(duplicate.status_code, 409)
        types = self.client.get("/people/training-types").get_json()["training_types"]
        self.assertEqual(
            types,
            [
                {
                    "id": created.get_json()["id"],
                    "name": "50m Sprint",
                    "is_default": True,
                }
            ],
        )

        self.client.post("/people/race-series", data={"name": "Spring Cup"})
        series = self.client.get("/people/race-series").get_json()["race_series"]
        self.assertEqual([s["name"] for s in series], ["Spring Cup"])

    def test_delete_person_admin_only(self):
        seed(
            self.db,
            "trainingAttempts",
            "1",
            {
                "date": "2024-05-01",
                "personId": "a",
                "typeName": "50m Sprint",
                "value": 8.0,
            },
        )
        self.login_as(ROLE_MEMBER, person_id="a")
        self.assertEqual(self.client.post("/people/a/delete").status_code, 403)

        self.login_as(ROLE_ADMIN)
        response = self.client.post("/people/a/delete")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["removed_attempts"], 1)
        self.assertFalse(self.db.collection("people").document("a").get().exists)
        self.assertFalse(
            self.db.collection("trainingAttempts").document("1").get().exists
        )
        self.assertEqual(self.client.post("/people/a/delete").status_code, 404)

    def test_edit_and_delete_training_types(self):
        self.db.collection("trainingTypes").document("t1").set(
            {"name": "50m", "isDefault": True}
        )
        self.db.collection("trainingTypes").document("t2").set(
            {"name": "Slalom", "isDefault": False}
        )
        seed(
            self.db,
            "trainingAttempts",
            "1",
            {"date": "2024-05-01", "personId": "a", "typeName": "50m", "value": 8.0},
        )
        self.login_as(ROLE_GUEST)
        response = self.client.post("/people/training-types/t2/delete")
        self.assertEqual(response.status_code, 403)

        self.login_as(ROLE_ADMIN)
        response = self.client.post(
            "/people/training-types/t1", data={"name": "50m Sprint", "is_default": "y"}
        )
        self.assertEqual(response.status_code, 200)
        attempt = self.db.collection("trainingAttempts").document("1").get()
        self.assertEqual(attempt.to_dict()["typeName"], "50m Sprint")

        response = self.client.post("/people/training-types/t1/delete")
        self.assertEqual(response.status_code, 409)
        response = self.client.post("/people/training-types/t2/delete")
        self.assertEqual(response.status_code, 200)
        types = self.client.get("/people/training-types").get_json()["training_types"]
        self.assertEqual([t["name"] for t in types], ["50m Sprint"])

    def test_edit_and_delete_race_series(self):
        self.db.collection("raceSeries").document("s1").set({"name": "Spring Cup"})
        self.db.collection("raceSeries").document("s2").set({"name": "Summer"})
        seed(
            self.db,
            "raceEvents",
            "e1",
            {
                "date": "2024-05-01",
                "name": "Dash",
                "seriesId": "s1",
                "seriesName": "Spring Cup",
            },
        )
        self.login_as(ROLE_ADMIN)

        response = self.client.post(
            "/people/race-series/s1", data={"name": "Spring Series"}
        )
        self.assertEqual(response.status_code, 200)
        event = self.db.collection("raceEvents").document("e1").get().to_dict()
        self.assertEqual(event["seriesName"], "Spring Series")
        response = self.client.post(
            "/people/race-series/s2", data={"name": "Spring Series"}
        )
        self.assertEqual(response.status_code, 409)

        response = self.client.post("/people/race-series/s1/delete")
        self.assertEqual(response.status_code, 409)
        response = self.client.post("/people/race-series/s2/delete")
        self.assertEqual(response.status_code, 200)
        response = self.client.post("/people/race-series/s2/delete")
        self.assertEqual(response.status_code, 404)


if __name__ == "__main__":
    unittest.main()
