import logging

from django.db import transaction
from django.db.models import Q
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import audit
from .access import resolve_budget_owner
from .cycle import ensure_current_cycle, period_containing
from .models import AuditLog, BudgetSetting, BudgetShare, Expense, ExpenseCategory, Income, Month
from .serializers import (
    AuditLogSerializer,
    BudgetSettingSerializer,
    BudgetShareSerializer,
    CategoryInputSerializer,
    ExpenseCategorySerializer,
    ExpenseInputSerializer,
    ExpenseSerializer,
    IncomeSerializer,
    ListFilterSerializer,
    MonthSerializer,
    PeriodSerializer,
    ShareInputSerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)

AUDIT_LOG_LIMIT = 100


def active_month(user):
    return Month.objects.filter(user=user, active=True).first()


class PeriodView(APIView):
    """
    GET  /api/budget/periods/  -> months with their weekly periods
    POST /api/budget/periods/  -> start a new period (roll the budget month over)
    """
    def get(self, request):
        owner = resolve_budget_owner(request)
        months = Month.objects.filter(user=owner).prefetch_related("periods")
        return Response(MonthSerializer(months, many=True).data)

    def post(self, request):
        result = ensure_current_cycle(request.user.pk)
        audit.record(
            request.user, "rollover", "month", result.month_id,
            periods=len(result.period_ids), created=result.month_created,
        )
        return Response(
            {"month_id": result.month_id, "period_ids": result.period_ids},
            status=status.HTTP_201_CREATED if result.month_created else status.HTTP_200_OK,
        )


class CurrentPeriodView(APIView):
    def get(self, request):
        owner = resolve_budget_owner(request)
        period = period_containing(owner, timezone.localdate())
        if not period:
            return Response({"error": "No period covers today"}, status=status.HTTP_404_NOT_FOUND)
        return Response(PeriodSerializer(period).data)


class CategoryListView(APIView):
    """
    GET  ?month_id=<id>  (defaults to the active month)
    POST { "name": "Rent", "budget": 1000 } -> added to the active month
    """
    def get(self, request):
        owner = resolve_budget_owner(request)
        filters = ListFilterSerializer(data=request.query_params)
        if not filters.is_valid():
            return Response({"error": filters.errors}, status=status.HTTP_400_BAD_REQUEST)
        month_id = filters.validated_data.get("month_id")

        cats = ExpenseCategory.objects.filter(user=owner)
        if month_id:
            cats = cats.filter(month_id=month_id)
        else:
            cats = cats.filter(month__active=True)
        return Response(ExpenseCategorySerializer(cats.order_by("id"), many=True).data)

    def post(self, request):
        owner = resolve_budget_owner(request, write=True)
        serializer = CategoryInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        month = active_month(owner)
        if not month:
            return Response({"error": "Month not found"}, status=status.HTTP_404_NOT_FOUND)

        category = ExpenseCategory.objects.create(user=owner, month=month, **serializer.validated_data)
        audit.record(owner, "create", "category", category.id, name=category.name, by=request.user.email)
        return Response(ExpenseCategorySerializer(category).data, status=status.HTTP_201_CREATED)


class CategoryDetailView(APIView):
    def put(self, request, pk):
        owner = resolve_budget_owner(request, write=True)
        category = ExpenseCategory.objects.filter(pk=pk, user=owner).first()
        if not category:
            return Response({"error": "Category not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = CategoryInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        category.name = serializer.validated_data["name"]
        category.budget = serializer.validated_data["budget"]
        category.save()
        audit.record(owner, "update", "category", category.id, name=category.name, by=request.user.email)
        return Response(ExpenseCategorySerializer(category).data)

    def delete(self, request, pk):
        owner = resolve_budget_owner(request, write=True)
        category = ExpenseCategory.objects.filter(pk=pk, user=owner).first()
        if not category:
            return Response({"error": "Category not found"}, status=status.HTTP_404_NOT_FOUND)

        audit.record(owner, "delete", "category", category.id, name=category.name, by=request.user.email)
        category.delete()
        return Response({"message": "Category deleted"})


class ExpenseListView(APIView):
    """
    GET  ?month_id=<id> | ?period_id=<id>  (defaults to the active month)
    POST {
      "description": "Groceries",
      "amount": 42.50,
      "category_id": 3,
      "date": "2024-03-12"
    }
    The expense is filed under the period whose range contains its date.
    """
    def get(self, request):
        owner = resolve_budget_owner(request)
        filters = ListFilterSerializer(data=request.query_params)
        if not filters.is_valid():
            return Response({"error": filters.errors}, status=status.HTTP_400_BAD_REQUEST)
        month_id = filters.validated_data.get("month_id")
        period_id = filters.validated_data.get("period_id")

        expenses = Expense.objects.filter(user=owner).select_related("category", "period")
        if month_id:
            expenses = expenses.filter(period__month_id=month_id)
        elif period_id:
            expenses = expenses.filter(period_id=period_id)
        else:
            expenses = expenses.filter(period__month__active=True)
        return Response(ExpenseSerializer(expenses.order_by("date", "id"), many=True).data)

    @transaction.atomic
    def post(self, request):
        owner = resolve_budget_owner(request, write=True)
        serializer = ExpenseInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        category = ExpenseCategory.objects.filter(pk=data["category_id"], user=owner).first()
        if not category:
            return Response({"error": "Category not found"}, status=status.HTTP_404_NOT_FOUND)

        period = period_containing(owner, data["date"])
        if not period:
            return Response({"error": "Period not found"}, status=status.HTTP_404_NOT_FOUND)
        # categories are scoped per month
        if category.month_id != period.month_id:
            return Response(
                {"error": "Category does not belong to the month of this expense"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        expense = Expense.objects.create(
            user=owner,
            category=category,
            period=period,
            description=data["description"],
            amount=data["amount"],
            date=data["date"],
        )
        audit.record(
            owner, "create", "expense", expense.id,
            amount=str(expense.amount), description=expense.description, by=request.user.email,
        )
        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


class ExpenseDetailView(APIView):
    def delete(self, request, pk):
        owner = resolve_budget_owner(request, write=True)
        expense = Expense.objects.filter(pk=pk, user=owner).first()
        if not expense:
            return Response({"error": "Expense not found"}, status=status.HTTP_404_NOT_FOUND)

        audit.record(
            owner, "delete", "expense", expense.id,
            amount=str(expense.amount), description=expense.description, by=request.user.email,
        )
        expense.delete()
        return Response({"message": "Expense deleted"})


class IncomeListView(APIView):
    """
    POST { "source": "Salary", "amount": 3200, "frequency": "monthly" }
    """
    def get(self, request):
        owner = resolve_budget_owner(request)
        incomes = Income.objects.filter(user=owner).order_by("id")
        return Response(IncomeSerializer(incomes, many=True).data)

    def post(self, request):
        owner = resolve_budget_owner(request, write=True)
        serializer = IncomeSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        income = serializer.save(user=owner)
        audit.record(owner, "create", "income", income.id, source=income.source, by=request.user.email)
        return Response(IncomeSerializer(income).data, status=status.HTTP_201_CREATED)


class IncomeDetailView(APIView):
    def get(self, request, pk):
        owner = resolve_budget_owner(request)
        income = Income.objects.filter(pk=pk, user=owner).first()
        if not income:
            return Response({"error": "Income not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(IncomeSerializer(income).data)

    def put(self, request, pk):
        owner = resolve_budget_owner(request, write=True)
        income = Income.objects.filter(pk=pk, user=owner).first()
        if not income:
            return Response({"error": "Income not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = IncomeSerializer(income, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        income = serializer.save()
        audit.record(owner, "update", "income", income.id, source=income.source, by=request.user.email)
        return Response(IncomeSerializer(income).data)

    def delete(self, request, pk):
        owner = resolve_budget_owner(request, write=True)
        income = Income.objects.filter(pk=pk, user=owner).first()
        if not income:
            return Response({"error": "Income not found"}, status=status.HTTP_404_NOT_FOUND)

        audit.record(owner, "delete", "income", income.id, source=income.source, by=request.user.email)
        income.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class BudgetSettingView(APIView):
    """
    GET -> settings, created with defaults if missing
    PUT { "monthly_goal": 500, "cycle_start_day_number": 1, "cycle_start_day_name": 1 }
    New cycle settings apply from the next period rollover.
    """
    def get(self, request):
        setting, _ = BudgetSetting.objects.get_or_create(user=request.user)
        return Response(BudgetSettingSerializer(setting).data)

    def put(self, request):
        setting, _ = BudgetSetting.objects.get_or_create(user=request.user)
        serializer = BudgetSettingSerializer(setting, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        serializer.save()
        audit.record(request.user, "update", "settings", setting.id, **{
            k: str(v) for k, v in serializer.validated_data.items()
        })
        return Response(serializer.data)


class ShareListView(APIView):
    """
    GET  -> users this budget is shared with
    POST { "email": "partner@email.com", "can_write": true }
    """
    def get(self, request):
        shares = BudgetShare.objects.filter(owner=request.user).select_related("shared_with").order_by("id")
        return Response(BudgetShareSerializer(shares, many=True).data)

    def post(self, request):
        serializer = ShareInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        email = serializer.validated_data["email"]
        shared_with = User.objects.filter(email__iexact=email).first()
        if not shared_with:
            return Response({"error": "User not found"}, status=status.HTTP_404_NOT_FOUND)
        if shared_with.pk == request.user.pk:
            return Response({"error": "You cannot share a budget with yourself"}, status=status.HTTP_400_BAD_REQUEST)
        if BudgetShare.objects.filter(owner=request.user, shared_with=shared_with).exists():
            return Response({"error": "Budget already shared with this user"}, status=status.HTTP_409_CONFLICT)

        share = BudgetShare.objects.create(
            owner=request.user,
            shared_with=shared_with,
            can_write=serializer.validated_data["can_write"],
        )
        audit.record(request.user, "create", "share", shared_with.pk, email=email, can_write=share.can_write)
        return Response(BudgetShareSerializer(share).data, status=status.HTTP_201_CREATED)


class ShareDetailView(APIView):
    def delete(self, request, user_id):
        deleted, _ = BudgetShare.objects.filter(owner=request.user, shared_with_id=user_id).delete()
        if not deleted:
            return Response({"error": "Share not found"}, status=status.HTTP_404_NOT_FOUND)

        audit.record(request.user, "delete", "share", user_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AuditLogView(APIView):
    """Latest changes to the user's budget and to budgets shared with them."""
    def get(self, request):
        shared_owner_ids = BudgetShare.objects.filter(shared_with=request.user).values("owner_id")
        logs = (
            AuditLog.objects.filter(Q(user=request.user) | Q(user_id__in=shared_owner_ids))
            .select_related("user")
            .order_by("-timestamp", "-id")[:AUDIT_LOG_LIMIT]
        )
        return Response(AuditLogSerializer(logs, many=True).data)
