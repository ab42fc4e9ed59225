from django.urls import path
from .views import (
    AuditLogView,
    BudgetSettingView,
    CategoryDetailView,
    CategoryListView,
    CurrentPeriodView,
    ExpenseDetailView,
    ExpenseListView,
    IncomeDetailView,
    IncomeListView,
    PeriodView,
    ShareDetailView,
    ShareListView,
)

urlpatterns = [
    path("periods/", PeriodView.as_view(), name="periods"),
    path("periods/current/", CurrentPeriodView.as_view(), name="current-period"),
    path("categories/", CategoryListView.as_view(), name="categories"),
    path("categories/<int:pk>/", CategoryDetailView.as_view(), name="category-detail"),
    path("expenses/", ExpenseListView.as_view(), name="expenses"),
    path("expenses/<int:pk>/", ExpenseDetailView.as_view(), name="expense-detail"),
    path("incomes/", IncomeListView.as_view(), name="incomes"),
    path("incomes/<int:pk>/", IncomeDetailView.as_view(), name="income-detail"),
    path("settings/", BudgetSettingView.as_view(), name="budget-settings"),
    path("shares/", ShareListView.as_view(), name="shares"),
    path("shares/<int:user_id>/", ShareDetailView.as_view(), name="share-detail"),
    path("audit/", AuditLogView.as_view(), name="audit"),
]
