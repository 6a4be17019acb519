"""Tests for the training blueprint."""

import unittest

from runbike.core.constants import ROLE_ADMIN, ROLE_MEMBER
from tests.helpers import RouteTestCase, seed


class TestTrainingRoutes(RouteTestCase):
    def setUp(self):
        super().setUp()
        seed(self.db, "people", "a", {"name": "Alice"})
        seed(self.db, "people", "b", {"name": "Bob"})
        seed(self.db, "people", "h", {"name": "Hana", "isHidden": True})
        self.db.collection("trainingTypes").document("t1").set(
            {"name": "50m Sprint", "isDefault": True}
        )
        for doc_id, date, value in [
            ("1", "2024-05-01", 8.1),
            ("2", "2024-05-01", 8.3),
            ("3", "2024-05-03", 7.8),
        ]:
            seed(
                self.db,
                "trainingAttempts",
                doc_id,
                {
                    "date": date,
                    "personId": "a",
                    "typeName": "50m Sprint",
                    "value": value,
                },
            )

    def test_trend(self):
        self.login_as(ROLE_ADMIN)

        data = self.client.get("/training/people/a/trend?type=50m+Sprint").get_json()

        self.assertEqual(data["personal_best"], 7.8)
        dates = [t["date"] for t in data["trend"]]
        self.assertEqual(dates, ["2024-05-03", "2024-05-01"])
        self.assertEqual(data["trend"][0]["stability"], 100)

    def test_trend_of_retired_person_is_hidden(self):
        self.login_as(ROLE_ADMIN)

        self.assertEqual(self.client.get("/training/people/h/trend").status_code, 404)
        self.assertEqual(self.client.get("/training/people/z/trend").status_code, 404)

    def test_day_detail(self):
        self.login_as(ROLE_ADMIN)

        data = self.client.get("/training/people/a/day/2024-05-01").get_json()

        self.assertEqual([a["value"] for a in data["attempts"]], [8.1, 8.3])
        bad = self.client.get("/training/people/a/day/yesterday")
        self.assertEqual(bad.status_code, 400)

    def test_member_records_own_attempt(self):
        self.login_as(ROLE_MEMBER, person_id="a")

        response = self.client.post(
            "/training/attempts",
            data={
                "person_id": "a",
                "type_name": "50m Sprint",
                "date": "2024-05-04",
                "value": "7.5",
            },
        )

        self.assertEqual(response.status_code, 201)
        attempt_id = response.get_json()["id"]
        stored = self.db.collection("trainingAttempts").document(attempt_id).get()
        self.assertEqual(stored.to_dict()["value"], 7.5)

    def test_member_cannot_record_for_others(self):
        self.login_as(ROLE_MEMBER, person_id="a")

        response = self.client.post(
            "/training/attempts",
            data={
                "person_id": "b",
                "type_name": "50m Sprint",
                "date": "2024-05-04",
                "value": "7.5",
            },
        )

        self.assertEqual(response.status_code, 403)

    def test_rejects_bad_values_and_types(self):
        self.login_as(ROLE_ADMIN)
        base = {"person_id": "a", "type_name": "50m Sprint", "date": "2024-05-04"}

        for value in ("0", "-1", "fast", "nan", "inf", "-inf"):
            with self.subTest(value=value):
                response = self.client.post(
                    "/training/attempts", data=dict(base, value=value)
                )
                self.assertEqual(response.status_code, 400)
                response = self.client.post(
                    "/training/attempts/1", data={"value": value}
                )
                self.assertEqual(response.status_code, 400)

        stored = self.db.collection("trainingAttempts").document("1").get()
        self.assertEqual(stored.to_dict()["value"], 8.1)

        response = self.client.post(
            "/training/attempts", data=dict(base, type_name="Slalom", value="7")
        )
        self.assertEqual(response.status_code, 400)

    def test_edit_and_delete(self):
        self.login_as(ROLE_MEMBER, person_id="a")

        response = self.client.post("/training/attempts/1", data={"value": "7.7"})
        self.assertEqual(response.status_code, 200)
        stored = self.db.collection("trainingAttempts").document("1").get()
        self.assertEqual(stored.to_dict()["value"], 7.7)
        self.assertEqual(stored.to_dict()["date"], "2024-05-01")

        response = self.client.post("/training/attempts/1/delete")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(
            self.db.collection("trainingAttempts").document("1").get().exists
        )

    def test_member_cannot_edit_others(self):
        self.login_as(ROLE_MEMBER, person_id="b")

        response = self.client.post("/training/attempts/1", data={"value": "7.7"})

        self.assertEqual(response.status_code, 403)


if __name__ == "__main__":
    unittest.main()
