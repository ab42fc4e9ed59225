import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from budget.models import BudgetSetting, Month, Period

User = get_user_model()

PASSWORD = "Budget-Cycle-2024!"


@pytest.fixture
def client():
    return APIClient()


@pytest.mark.django_db
def test_signup_provisions_settings_and_cycle(client):
    response = client.post(
        "/api/accounts/signup/", {"email": "New@Example.com", "password": PASSWORD}, format="json"
    )

    assert response.status_code == 201
    assert response.data["email"] == "new@example.com"
    assert response.data["access"] and response.data["refresh"]

    user = User.objects.get(email="new@example.com")
    setting = BudgetSetting.objects.get(user=user)
    assert (setting.cycle_start_day_number, setting.cycle_start_day_name) == (25, 0)
    assert Month.objects.filter(user=user, active=True).count() == 1
    assert Period.objects.filter(user=user).exists()


@pytest.mark.django_db
def test_signup_rejects_duplicate_email(client, user):
    response = client.post(
        "/api/accounts/signup/", {"email": "OWNER@example.com", "password": PASSWORD}, format="json"
    )
    assert response.status_code == 400
    assert "email" in response.data


@pytest.mark.django_db
def test_signup_rejects_short_password(client):
    response = client.post("/api/accounts/signup/", {"email": "a@example.com", "password": "abc"}, format="json")
    assert response.status_code == 400
    assert "password" in response.data
    assert not User.objects.filter(email="a@example.com").exists()


@pytest.mark.django_db
def test_login_returns_tokens_and_rolls_cycle(client, user):
    response = client.post(
        "/api/accounts/login/", {"email": "owner@example.com", "password": PASSWORD}, format="json"
    )

    assert response.status_code == 200
    assert response.data["access"]
    assert Month.objects.filter(user=user, active=True).count() == 1

    token = response.data["access"]
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    assert client.get("/api/budget/periods/").status_code == 200


@pytest.mark.django_db
def test_login_creates_missing_settings(client, make_user):
    user = make_user("legacy@example.com", with_setting=False)

    response = client.post(
        "/api/accounts/login/", {"email": "legacy@example.com", "password": PASSWORD}, format="json"
    )

    assert response.status_code == 200
    assert BudgetSetting.objects.filter(user=user).exists()


@pytest.mark.django_db
def test_login_with_wrong_password(client, user):
    response = client.post(
        "/api/accounts/login/", {"email": "owner@example.com", "password": "wrong-password"}, format="json"
    )
    assert response.status_code == 401
