from django.db import models


class Notification(models.Model):
    """
    Message shown to users of a shop.

    A null ``shop`` makes the notification global; a null ``user`` makes
    it shop-wide rather than addressed to one person.
    """

    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='notifications'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='notifications'
    )
    type = models.CharField(max_length=50)
    message = models.TextField()
    is_sent = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    acknowledged_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'notifications'
        indexes = [
            models.Index(fields=['shop', '-id'], name='notif_shop_id_idx'),
        ]
        ordering = ['-id']

    def __str__(self):
        scope = self.shop_id or 'global'
        return f"[{scope}] {self.type}: {self.message[:40]}"
