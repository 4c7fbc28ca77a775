"""Client domain entity: a person the dietitian assigns plans to. Read-only here."""


class Client:
    def __init__(self, id: str = "", name: str = "", goal: str = "", recent_plan: str = ""):
        self.id = id
        self.name = name
        self.goal = goal
        self.recent_plan = recent_plan

    def __str__(self) -> str:
        return f"{self.name} - {self.goal}" if self.goal else self.name

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Client(
            id=str(d.get("id") or d.get("_id") or ""),
            name=d.get("name") or "",
            goal=d.get("goal") or "",
            recent_plan=d.get("recentPlan") or "",
        )

    def to_dict(self):
        return {"id": self.id, "name": self.name, "goal": self.goal, "recentPlan": self.recent_plan}
