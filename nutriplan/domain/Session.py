"""Session: who is signed in and the bearer token to send with every API call.

Issued by the auth collaborator; passed explicitly into the API gateway, the
store and the controller.
"""
from typing import Dict


class Session:
    def __init__(self, user_id: str, token: str = "", role: str = "dietitian"):
        self.user_id = user_id
        self.token = token
        self.role = role

    def __repr__(self) -> str:
        return f"Session(user_id={self.user_id!r}, role={self.role!r})"

    @property
    def is_dietitian(self) -> bool:
        return self.role == "dietitian"

    def auth_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers
