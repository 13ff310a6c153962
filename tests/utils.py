from __future__ import annotations

from typing import Any

from httpx import AsyncClient
from src.api.deps import issue_smoke_token
from src.core.auth import Role

# Seeded accounts: one student, two tutors
STUDENT_ID = "student-a"
TUTOR_ID = "tutor-b"
OTHER_TUTOR_ID = "tutor-c"


def auth_headers(user_id: str = "student-a", role: Role = Role.STUDENT) -> dict[str, str]:
    token = issue_smoke_token(user_id, role=role, email=f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


def question_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "title": "Quadratic roots",
        "description": "Why does the discriminant decide the number of roots?",
        "topic": "algebra",
    }
    payload.update(overrides)
    return payload


async def create_question(
    client: AsyncClient,
    headers: dict[str, str],
    **overrides: Any,
) -> dict[str, Any]:
    """POST /questions and return the created doubt."""
    response = await client.post("/questions", json=question_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
