from django.db import models


class ComplaintStatus(models.TextChoices):
    OPEN = 'open', 'Open'
    IN_PROGRESS = 'in_progress', 'In progress'
    RESOLVED = 'resolved', 'Resolved'
    REJECTED = 'rejected', 'Rejected'


class Complaint(models.Model):
    """A grievance a user files against a shop, worked off by administrators."""

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='complaints'
    )
    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.PROTECT,
        related_name='complaints'
    )
    description = models.TextField()
    status = models.CharField(
        max_length=20,
        choices=ComplaintStatus.choices,
        default=ComplaintStatus.OPEN
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    # Set only while the status is ``resolved``
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'complaints'
        indexes = [
            models.Index(fields=['shop', '-created_at'], name='complaint_shop_created_idx'),
            models.Index(fields=['user', '-created_at'], name='complaint_user_created_idx'),
        ]
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"#{self.pk} {self.shop_id} ({self.status})"
