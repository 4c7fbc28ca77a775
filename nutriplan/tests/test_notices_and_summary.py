import unittest

from nutriplan.domain.MealPlan import MealPlan
from nutriplan.events.Event_Bus import EventBus
from nutriplan.events.event_helpers import (
    publish_dates_assigned,
    publish_dates_removed,
    publish_plan_created,
    publish_plans_refreshed,
)
from nutriplan.events.web_observers import NoticeFeed, describe
from nutriplan.logic.reporting.schedule import client_day_plan, summarize_month


class TestNoticeFeed(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.feed = NoticeFeed(max_notices=3)
        self.feed.start(self.bus)
        self.plan = MealPlan("P1", "Balanced Diet")

    def tearDown(self):
        self.feed.stop()

    def test_messages(self):
        publish_dates_assigned("C1", self.plan, ["2024-06-03", "2024-06-04", "2024-06-05"], bus=self.bus)
        publish_dates_assigned("C1", self.plan, ["2024-06-07"], bus=self.bus)
        publish_dates_removed("C1", self.plan, ["2024-06-03", "2024-06-04"], bus=self.bus)
        messages = [n["message"] for n in self.feed.get_notices()["notices"]]
        self.assertEqual(messages, [
            'Plan "Balanced Diet" assigned to 3 days!',
            'Plan "Balanced Diet" assigned for 2024-06-07!',
            'Plan "Balanced Diet" removed from 2 days.',
        ])

    def test_cursor_and_cap(self):
        for _ in range(4):
            publish_plan_created("C1", self.plan, bus=self.bus)
        page = self.feed.get_notices()
        self.assertEqual([n["id"] for n in page["notices"]], [2, 3, 4])
        self.assertEqual(page["next_cursor"], 4)
        self.assertEqual(self.feed.get_notices(since=4)["notices"], [])

    def test_empty_refresh_is_silent(self):
        publish_plans_refreshed("C1", {"added": [], "removed": [], "changed": []}, bus=self.bus)
        self.assertEqual(self.feed.get_notices()["notices"], [])
        self.assertEqual(describe("plan.refreshed", {"added": ["P2"], "removed": [], "changed": ["P1"]}),
                         "Meal plans updated (2 changed).")

    def test_stopped_feed_ignores_events(self):
        self.feed.stop()
        publish_plan_created("C1", self.plan, bus=self.bus)
        self.assertEqual(self.feed.get_notices()["notices"], [])


class TestMonthSummary(unittest.TestCase):

    def test_summary(self):
        plans = [
            MealPlan("P1", "Balanced Diet", "Mediterranean", 1800, assigned_dates={"2024-06-01", "2024-06-02"}),
            MealPlan("P2", "Keto Plan", "Keto", 1500, assigned_dates={"2024-06-03", "2024-07-01"}),
            MealPlan("P3", "Unused", "Vegan", 2000),
        ]
        summary = summarize_month(plans, 2024, 6)
        self.assertEqual(summary["days"], 30)
        self.assertEqual(summary["assigned_days"], 3)
        self.assertEqual(summary["free_days"], 27)
        self.assertEqual([r["id"] for r in summary["plans"]], ["P1", "P2"])
        self.assertEqual(summary["total_calories"], 5100)
        self.assertEqual(summary["average_calories"], 1700.0)

    def test_empty_month(self):
        summary = summarize_month([], 2024, 2)
        self.assertEqual(summary["free_days"], 29)
        self.assertEqual(summary["average_calories"], 0.0)
        self.assertIsInstance(summary["average_calories"], float)
        self.assertIsNone(client_day_plan([], "2024-02-01"))


if __name__ == '__main__':
    unittest.main()
