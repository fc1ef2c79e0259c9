"""
Complaint filing and resolution.

Any signed-in user files complaints against a shop and sees the ones
they filed. Administrators see a shop's complaints and move them
through ``ComplaintStatus``.
"""

import logging
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User, Role
from apps.shops.models import Shop

from .exceptions import ComplaintValidationError, ComplaintNotFoundError
from .models import Complaint, ComplaintStatus

logger = logging.getLogger(__name__)

LIST_LIMIT = 100


def file_complaint(*, user: User, shop_id: Optional[str], description: Optional[str]) -> Complaint:
    """
    File an open complaint against a shop.

    Raises:
        ComplaintValidationError: If shop or description is missing
        ComplaintNotFoundError: If the shop does not exist
    """
    description = (description or '').strip()
    if not shop_id or not description:
        raise ComplaintValidationError("shopId and description required")

    if not Shop.objects.filter(id=shop_id).exists():
        raise ComplaintNotFoundError(f"Shop {shop_id} not found")

    complaint = Complaint.objects.create(
        user=user,
        shop_id=shop_id,
        description=description,
    )
    logger.info("Complaint %s filed by user %s against %s", complaint.id, user.id, shop_id)
    return complaint


def list_complaints(*, user: User, shop_id: Optional[str] = None) -> List[Complaint]:
    """
    Newest-first complaints visible to ``user``.

    Admins get the complaints of ``shop_id`` (or of their own shop); an
    admin with neither sees every shop. Everyone else gets the complaints
    they filed themselves.
    """
    queryset = Complaint.objects.select_related('user')

    if user.role == Role.ADMIN:
        shop_id = shop_id or user.shop_id
        if shop_id:
            queryset = queryset.filter(shop_id=shop_id)
    else:
        queryset = queryset.filter(user=user)

    return list(queryset.order_by('-created_at', '-id')[:LIST_LIMIT])


@transaction.atomic
def update_complaint_status(*, complaint_id: int, status: str) -> Complaint:
    """
    Move a complaint to ``status``. ``resolved_at`` is stamped when the
    complaint becomes resolved and cleared for any other status.

    Raises:
        ComplaintValidationError: If status is not a ComplaintStatus value
        ComplaintNotFoundError: If the complaint does not exist
    """
    if not status:
        raise ComplaintValidationError("status required")
    if status not in ComplaintStatus.values:
        raise ComplaintValidationError(f"Invalid status: {status}")

    try:
        complaint = Complaint.objects.select_for_update().get(id=complaint_id)
    except Complaint.DoesNotExist:
        raise ComplaintNotFoundError("Complaint not found")

    complaint.status = status
    complaint.resolved_at = timezone.now() if status == ComplaintStatus.RESOLVED else None
    complaint.save(update_fields=['status', 'resolved_at', 'updated_at'])

    logger.info("Complaint %s moved to %s", complaint.id, status)
    return complaint
