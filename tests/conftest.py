import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from budget.models import BudgetSetting

User = get_user_model()


@pytest.fixture
def make_user(db):
    def _make(email, day_number=25, day_name=0, with_setting=True):
        user = User.objects.create_user(username=email, email=email, password="Budget-Cycle-2024!")
        if with_setting:
            BudgetSetting.objects.create(
                user=user, cycle_start_day_number=day_number, cycle_start_day_name=day_name
            )
        return user
    return _make


@pytest.fixture
def user(make_user):
    return make_user("owner@example.com")


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client


@pytest.fixture
def api_client(client_for, user):
    return client_for(user)
