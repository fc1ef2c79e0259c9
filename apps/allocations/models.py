from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class ItemCode(models.TextChoices):
    RICE = 'rice', 'Rice'
    WHEAT = 'wheat', 'Wheat'
    SUGAR = 'sugar', 'Sugar'


class MonthlyAllocation(models.Model):
    """A cardholder's eligible vs. collected quantity of one item for one month."""

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='allocations'
    )
    item_code = models.CharField(max_length=20)
    month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    year = models.PositiveSmallIntegerField()

    # Quantities in the item's unit (kg for grains and sugar)
    eligible_quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    collected_quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    collection_date = models.DateTimeField(null=True, blank=True)

    # Audit
    last_modified_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='modified_allocations'
    )
    modification_reason = models.CharField(max_length=255, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'monthly_allocations'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'item_code', 'month', 'year'],
                name='uniq_allocation_user_item_period',
            ),
            models.CheckConstraint(
                condition=models.Q(collected_quantity__lte=models.F('eligible_quantity')),
                name='allocation_collected_lte_eligible',
            ),
        ]
        indexes = [
            models.Index(fields=['user', 'year', 'month'], name='alloc_user_period_idx'),
        ]
        ordering = ['item_code']

    def __str__(self):
        return (
            f"{self.user_id} {self.item_code} {self.month:02d}/{self.year}: "
            f"{self.collected_quantity}/{self.eligible_quantity}"
        )

    @property
    def remaining_quantity(self):
        return max(Decimal('0'), self.eligible_quantity - self.collected_quantity)


class QuotaChangeLog(models.Model):
    """
    Append-only audit trail of distribution events.

    Rows are immutable once written: saving an existing row or deleting
    one raises ``RuntimeError``.
    """

    allocation = models.ForeignKey(
        MonthlyAllocation,
        on_delete=models.PROTECT,
        related_name='change_logs'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='quota_change_logs'
    )
    item_code = models.CharField(max_length=20)
    month = models.PositiveSmallIntegerField()
    year = models.PositiveSmallIntegerField()

    old_quantity = models.DecimalField(max_digits=10, decimal_places=2)
    new_quantity = models.DecimalField(max_digits=10, decimal_places=2)
    # Signed: corrections that reduce the collected amount are negative
    change_amount = models.DecimalField(max_digits=10, decimal_places=2)

    changed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='quota_changes_made'
    )
    changed_by_role = models.CharField(max_length=20)
    reason = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'quota_change_log'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='qcl_user_created_idx'),
        ]
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.item_code}: {self.old_quantity} -> {self.new_quantity} by {self.changed_by_role}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise RuntimeError("QuotaChangeLog rows are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("QuotaChangeLog rows cannot be deleted")
