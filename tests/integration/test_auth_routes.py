"""Integration tests for account endpoints."""

from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from src.infrastructure.db.models import UserModel, UserStatus


@pytest.fixture
def test_user() -> dict:
    return {
        "email": "testuser@example.com",
        "password": "testpassword123",
        "full_name": "Test User",
    }


@pytest.fixture
def test_tutor() -> dict:
    return {
        "email": "tutor@example.com",
        "password": "testpassword123",
        "full_name": "Tess Tutor",
        "role": "tutor",
        "expertise": ["algebra", "geometry"],
    }


class TestRegisterEndpoint:
    """Tests for POST /auth/register endpoint."""

    async def test_register_student(self, async_client: AsyncClient, test_user: dict) -> None:
        response = await async_client.post("/auth/register", json=test_user)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "Registration successful"
        assert data["user"]["email"] == test_user["email"]
        assert data["user"]["role"] == "student"
        assert data["user"]["status"] == "active"
        assert "access_token" in data["tokens"]
        assert "hashed_password" not in data["user"]

    async def test_register_tutor(self, async_client: AsyncClient, test_tutor: dict) -> None:
        response = await async_client.post("/auth/register", json=test_tutor)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user"]["expertise"] == ["algebra", "geometry"]

    async def test_register_tutor_without_expertise(
        self, async_client: AsyncClient, test_tutor: dict
    ) -> None:
        test_tutor["expertise"] = []

        response = await async_client.post("/auth/register", json=test_tutor)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "expertise" in response.json()["detail"]
        assert response.json()["kind"] == "validation"

    async def test_register_duplicate_email(
        self, async_client: AsyncClient, test_user: dict
    ) -> None:
        await async_client.post("/auth/register", json=test_user)

        response = await async_client.post("/auth/register", json=test_user)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert "already exists" in response.json()["detail"]
        assert response.json()["kind"] == "conflict"

    async def test_register_invalid_email(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/auth/register",
            json={"email": "not-an-email", "password": "password123", "full_name": "X"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["kind"] == "validation"


class TestLoginEndpoint:
    """Tests for POST /auth/login endpoint."""

    async def test_login_success(self, async_client: AsyncClient, test_user: dict) -> None:
        await async_client.post("/auth/register", json=test_user)

        response = await async_client.post(
            "/auth/login",
            json={"email": test_user["email"], "password": test_user["password"]},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"]["last_login_at"] is not None
        assert "access_token" in data["tokens"]

    async def test_login_wrong_password(self, async_client: AsyncClient, test_user: dict) -> None:
        await async_client.post("/auth/register", json=test_user)

        response = await async_client.post(
            "/auth/login",
            json={"email": test_user["email"], "password": "wrongpassword"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert "Invalid email or password" in response.json()["detail"]
        assert response.json()["kind"] == "authentication"

    async def test_login_suspended_account(
        self, async_client: AsyncClient, db: AsyncSession, test_user: dict
    ) -> None:
        await async_client.post("/auth/register", json=test_user)
        await db.execute(
            update(UserModel)
            .where(UserModel.email == test_user["email"])
            .values(status=UserStatus.SUSPENDED)
        )
        await db.commit()

        response = await async_client.post(
            "/auth/login",
            json={"email": test_user["email"], "password": test_user["password"]},
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"kind": "authorization", "detail": "Account is suspended"}


class TestMeEndpoint:
    """Tests for GET /auth/me endpoint."""

    async def test_me_success(self, async_client: AsyncClient, test_user: dict) -> None:
        register_response = await async_client.post("/auth/register", json=test_user)
        token = register_response.json()["tokens"]["access_token"]

        response = await async_client.get(
            "/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["full_name"] == test_user["full_name"]

    async def test_me_no_token(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["kind"] == "authentication"

    async def test_me_garbage_token(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/auth/me", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"kind": "authentication", "detail": "Token is not valid"}
