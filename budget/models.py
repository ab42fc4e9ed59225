from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class BudgetSetting(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="budget_setting")
    # day of month marking the cycle boundary
    cycle_start_day_number = models.PositiveSmallIntegerField(
        default=25, validators=[MinValueValidator(1), MaxValueValidator(31)]
    )
    # 0 = Sunday ... 6 = Saturday
    cycle_start_day_name = models.PositiveSmallIntegerField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(6)]
    )
    monthly_goal = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    def __str__(self):
        return f"{self.user.email} - day {self.cycle_start_day_number}/{self.cycle_start_day_name}"


class Month(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="months")
    year = models.PositiveSmallIntegerField()
    month_number = models.PositiveSmallIntegerField()
    active = models.BooleanField(default=False)

    class Meta:
        unique_together = ("user", "year", "month_number")
        ordering = ("year", "month_number")

    def __str__(self):
        return f"{self.user.email} - {self.year}-{self.month_number:02d}"


class Period(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="periods")
    month = models.ForeignKey(Month, on_delete=models.CASCADE, related_name="periods")
    start_date = models.DateField()  # inclusive
    end_date = models.DateField()  # exclusive
    week_name = models.CharField(max_length=20)

    class Meta:
        unique_together = ("user", "start_date", "end_date")
        ordering = ("start_date",)

    def __str__(self):
        return f"{self.user.email} - {self.week_name} ({self.start_date} - {self.end_date})"


class ExpenseCategory(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="expense_categories")
    month = models.ForeignKey(Month, on_delete=models.CASCADE, related_name="categories")
    name = models.CharField(max_length=50)
    budget = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    def __str__(self):
        return f"{self.user.email} - {self.name}"


class Expense(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="expenses")
    category = models.ForeignKey(ExpenseCategory, on_delete=models.CASCADE, related_name="expenses")
    period = models.ForeignKey(Period, on_delete=models.CASCADE, related_name="expenses")
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    date = models.DateField()

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user.email} - {self.description} - {self.amount}"


class Income(models.Model):
    FREQUENCY_CHOICES = (
        ("weekly", "Weekly"),
        ("fortnightly", "Fortnightly"),
        ("monthly", "Monthly"),
        ("yearly", "Yearly"),
        ("once", "Once"),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="incomes")
    source = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    frequency = models.CharField(max_length=20, choices=FREQUENCY_CHOICES, default="monthly")
    date = models.DateField(auto_now_add=True)

    def __str__(self):
        return f"{self.user.email} - {self.source} - {self.amount}"


class BudgetShare(models.Model):
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="budget_shares")
    shared_with = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="shared_budgets")
    can_write = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("owner", "shared_with")

    def __str__(self):
        return f"{self.owner.email} -> {self.shared_with.email}"


class AuditLog(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="audit_logs")
    action = models.CharField(max_length=20)
    entity = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=50, blank=True, default="")
    details = models.JSONField(default=dict, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-timestamp",)

    def __str__(self):
        return f"{self.user.email} {self.action} {self.entity} {self.entity_id}"
