from decimal import Decimal

from django.db import models


class StockChangeType(models.TextChoices):
    SHOPKEEPER_UPDATE = 'shopkeeper_update', 'Shopkeeper update'
    ADMIN_CORRECTION = 'admin_correction', 'Admin correction'
    GOVERNMENT_ALLOCATION = 'government_allocation', 'Government allocation'
    DELTA_UPDATE = 'delta_update', 'Delta update'


class StockItem(models.Model):
    """On-hand stock of one item at one shop."""

    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.CASCADE,
        related_name='stock_items'
    )
    item_code = models.CharField(max_length=20)
    item_name = models.CharField(max_length=100)
    item_name_hindi = models.CharField(max_length=100, blank=True)
    unit = models.CharField(max_length=10, default='kg')

    quantity = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    government_allocated = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    allocated_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_allocations'
    )
    last_restocked = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'stock_items'
        constraints = [
            models.UniqueConstraint(fields=['shop', 'item_code'], name='uniq_stock_shop_item'),
        ]
        ordering = ['item_code']

    def __str__(self):
        return f"{self.shop_id}/{self.item_code}: {self.quantity} {self.unit}"


class StockAuditLog(models.Model):
    """Append-only record of stock mutations. Written best-effort."""

    stock_item = models.ForeignKey(
        StockItem,
        on_delete=models.CASCADE,
        related_name='audit_logs'
    )
    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.CASCADE,
        related_name='stock_audit_logs'
    )
    item_code = models.CharField(max_length=20)
    changed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='stock_changes_made'
    )
    changed_by_role = models.CharField(max_length=20)
    change_type = models.CharField(max_length=30, choices=StockChangeType.choices)
    old_quantity = models.DecimalField(max_digits=12, decimal_places=2)
    new_quantity = models.DecimalField(max_digits=12, decimal_places=2)
    quantity_difference = models.DecimalField(max_digits=12, decimal_places=2)
    reason = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stock_audit_log'
        indexes = [
            models.Index(fields=['shop', 'created_at'], name='stock_audit_shop_created_idx'),
        ]
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.item_code} {self.change_type}: {self.old_quantity} -> {self.new_quantity}"
