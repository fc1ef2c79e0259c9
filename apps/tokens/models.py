from django.db import models


class TokenStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class Token(models.Model):
    """
    A scheduled visit of a cardholder to their shop.

    ``queue_position`` is 1-based and counted per shop and date.
    """

    id = models.CharField(primary_key=True, max_length=32)
    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.CASCADE,
        related_name='tokens'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='tokens'
    )
    token_date = models.DateField()
    time_slot = models.CharField(max_length=20)
    queue_position = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20,
        choices=TokenStatus.choices,
        default=TokenStatus.PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tokens'
        indexes = [
            models.Index(fields=['shop', 'token_date'], name='tokens_shop_date_idx'),
            models.Index(fields=['user', 'token_date'], name='tokens_user_date_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.id} #{self.queue_position} {self.token_date} {self.time_slot}"


class QueueCounter(models.Model):
    """Last queue position handed out for a shop on a date."""

    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.CASCADE,
        related_name='queue_counters'
    )
    date = models.DateField()
    last_position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'token_queue_counters'
        constraints = [
            models.UniqueConstraint(fields=['shop', 'date'], name='uniq_queue_counter_shop_date'),
        ]

    def __str__(self):
        return f"{self.shop_id} {self.date}: {self.last_position}"
