import unittest

from nutriplan.domain.Client import Client
from nutriplan.domain.Meal import Meal
from nutriplan.domain.MealPlan import MealPlan
from nutriplan.domain.Session import Session


class TestMealPlan(unittest.TestCase):

    def setUp(self):
        self.plan = MealPlan.from_dict({
            "_id": "665f1c",
            "planName": "  Keto Plan ",
            "dietType": "Keto",
            "calories": "1600",
            "meals": [{"name": "Eggs", "calories": "300", "details": "scrambled"}],
            "assignedDates": ["2024-06-03", "2024-06-01", 17],
        })

    def test_from_dict_reads_mongo_id_and_coerces(self):
        self.assertEqual(self.plan.id, "665f1c")
        self.assertEqual(self.plan.plan_name, "Keto Plan")
        self.assertEqual(self.plan.calories, 1600)
        self.assertEqual(self.plan.meals, [Meal("Eggs", 300, "scrambled")])
        self.assertEqual(self.plan.assigned_dates, {"2024-06-01", "2024-06-03"})

    def test_name_match_ignores_case(self):
        self.assertTrue(self.plan.has_name("keto plan"))
        self.assertTrue(self.plan.has_name(" KETO PLAN"))
        self.assertFalse(self.plan.has_name("Keto"))

    def test_to_dict_sorts_dates(self):
        data = self.plan.to_dict()
        self.assertEqual(data["assignedDates"], ["2024-06-01", "2024-06-03"])
        self.assertEqual(data["planName"], "Keto Plan")

    def test_copy_is_independent(self):
        clone = self.plan.copy()
        clone.assigned_dates.add("2024-06-09")
        self.assertNotIn("2024-06-09", self.plan.assigned_dates)

    def test_detail_view(self):
        view = self.plan.detail()
        self.assertEqual(view["planName"], "Keto Plan")
        self.assertIsNone(view["imageUrl"])
        self.assertEqual(view["meals"][0]["name"], "Eggs")

    def test_missing_fields_get_defaults(self):
        plan = MealPlan.from_dict({"id": 7})
        self.assertEqual(plan.id, "7")
        self.assertEqual(plan.diet_type, "Anything")
        self.assertEqual(plan.assigned_dates, set())


class TestClientAndSession(unittest.TestCase):

    def test_client_round_trip(self):
        client = Client.from_dict({"_id": "C1", "name": "Alice", "goal": "Weight Loss", "recentPlan": "Keto"})
        self.assertEqual(client.to_dict(), {"id": "C1", "name": "Alice", "goal": "Weight Loss", "recentPlan": "Keto"})

    def test_session_headers(self):
        self.assertEqual(Session("d1", "abc").auth_headers()["Authorization"], "Bearer abc")
        self.assertNotIn("Authorization", Session("d1").auth_headers())
        self.assertFalse(Session("u1", "t", role="user").is_dietitian)


if __name__ == '__main__':
    unittest.main()
