import calendar

from rest_framework import serializers

from .models import AuditLog, BudgetSetting, BudgetShare, Expense, ExpenseCategory, Income, Month, Period


class PeriodSerializer(serializers.ModelSerializer):
    class Meta:
        model = Period
        fields = ("id", "week_name", "start_date", "end_date")


class MonthSerializer(serializers.ModelSerializer):
    month_name = serializers.SerializerMethodField()
    periods = PeriodSerializer(many=True, read_only=True)

    class Meta:
        model = Month
        fields = ("id", "year", "month_number", "month_name", "active", "periods")

    def get_month_name(self, obj):
        return calendar.month_name[obj.month_number]


class ExpenseCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ExpenseCategory
        fields = ("id", "name", "budget", "month")
        read_only_fields = ("month",)


class CategoryInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50)
    budget = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class ExpenseSerializer(serializers.ModelSerializer):
    category = ExpenseCategorySerializer(read_only=True)
    period = PeriodSerializer(read_only=True)

    class Meta:
        model = Expense
        fields = ("id", "description", "amount", "date", "category", "period")


class ExpenseInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    category_id = serializers.IntegerField()
    date = serializers.DateField()


class IncomeSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)

    class Meta:
        model = Income
        fields = ("id", "source", "amount", "frequency", "date")
        read_only_fields = ("date",)


class BudgetSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = BudgetSetting
        fields = ("id", "cycle_start_day_number", "cycle_start_day_name", "monthly_goal")


class BudgetShareSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(source="shared_with.id", read_only=True)
    email = serializers.EmailField(source="shared_with.email", read_only=True)

    class Meta:
        model = BudgetShare
        fields = ("id", "user_id", "email", "can_write")


class ShareInputSerializer(serializers.Serializer):
    email = serializers.EmailField()
    can_write = serializers.BooleanField(default=False)

    def validate_email(self, value):
        return value.strip().lower()


class AuditLogSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = AuditLog
        fields = ("id", "email", "action", "entity", "entity_id", "details", "timestamp")


class ListFilterSerializer(serializers.Serializer):
    month_id = serializers.IntegerField(required=False, min_value=1)
    period_id = serializers.IntegerField(required=False, min_value=1)
