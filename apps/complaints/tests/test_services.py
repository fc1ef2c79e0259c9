"""
Service layer tests for complaints app.

Tests cover:
- Filing against an existing shop
- Role-dependent visibility
- Status changes and the resolved timestamp
"""

import pytest

from apps.complaints.exceptions import ComplaintValidationError, ComplaintNotFoundError
from apps.complaints.models import Complaint, ComplaintStatus
from apps.complaints.services import (
    file_complaint,
    list_complaints,
    update_complaint_status,
)


@pytest.mark.django_db
class TestFileComplaint:

    def test_files_open_complaint(self, shop, cardholder):
        complaint = file_complaint(user=cardholder, shop_id='SHOP001', description='  Short weight on rice ')

        assert complaint.status == ComplaintStatus.OPEN
        assert complaint.description == 'Short weight on rice'
        assert complaint.shop_id == 'SHOP001'
        assert complaint.resolved_at is None

    @pytest.mark.parametrize('shop_id, description', [
        (None, 'Shop closed early'),
        ('SHOP001', ''),
        ('SHOP001', '   '),
    ])
    def test_shop_and_description_required(self, shop, cardholder, shop_id, description):
        with pytest.raises(ComplaintValidationError, match='shopId and description required'):
            file_complaint(user=cardholder, shop_id=shop_id, description=description)

        assert Complaint.objects.count() == 0

    def test_unknown_shop(self, cardholder):
        with pytest.raises(ComplaintNotFoundError):
            file_complaint(user=cardholder, shop_id='SHOP404', description='Shop closed early')


@pytest.mark.django_db
class TestListComplaints:

    @pytest.fixture
    def filed(self, shop, other_shop, cardholder, shopkeeper, other_shopkeeper):
        return {
            'mine': file_complaint(user=cardholder, shop_id='SHOP001', description='Rice missing'),
            'keeper': file_complaint(user=shopkeeper, shop_id='SHOP001', description='Late truck'),
            'elsewhere': file_complaint(user=other_shopkeeper, shop_id='SHOP002', description='Sugar damp'),
        }

    def test_cardholder_sees_only_own(self, filed, cardholder):
        assert [c.id for c in list_complaints(user=cardholder)] == [filed['mine'].id]

    def test_shopkeeper_sees_only_own(self, filed, shopkeeper):
        assert [c.id for c in list_complaints(user=shopkeeper)] == [filed['keeper'].id]

    def test_admin_filters_by_shop(self, filed, admin_user):
        rows = list_complaints(user=admin_user, shop_id='SHOP002')

        assert [c.id for c in rows] == [filed['elsewhere'].id]

    def test_admin_without_shop_sees_all_newest_first(self, filed, admin_user):
        rows = list_complaints(user=admin_user)

        assert [c.id for c in rows] == [
            filed['elsewhere'].id, filed['keeper'].id, filed['mine'].id,
        ]

    def test_admin_defaults_to_own_shop(self, filed, admin_user, other_shop):
        admin_user.shop = other_shop
        admin_user.save()

        assert [c.id for c in list_complaints(user=admin_user)] == [filed['elsewhere'].id]


@pytest.mark.django_db
class TestUpdateComplaintStatus:

    @pytest.fixture
    def complaint(self, shop, cardholder):
        return file_complaint(user=cardholder, shop_id='SHOP001', description='Rice missing')

    def test_resolving_stamps_resolved_at(self, complaint):
        updated = update_complaint_status(complaint_id=complaint.id, status=ComplaintStatus.RESOLVED)

        assert updated.status == ComplaintStatus.RESOLVED
        assert updated.resolved_at is not None

    def test_reopening_clears_resolved_at(self, complaint):
        update_complaint_status(complaint_id=complaint.id, status=ComplaintStatus.RESOLVED)

        updated = update_complaint_status(complaint_id=complaint.id, status=ComplaintStatus.IN_PROGRESS)

        assert updated.status == ComplaintStatus.IN_PROGRESS
        assert updated.resolved_at is None

    @pytest.mark.parametrize('status, message', [('', 'status required'), ('lost', 'Invalid status')])
    def test_invalid_status(self, complaint, status, message):
        with pytest.raises(ComplaintValidationError, match=message):
            update_complaint_status(complaint_id=complaint.id, status=status)

        complaint.refresh_from_db()
        assert complaint.status == ComplaintStatus.OPEN

    def test_unknown_complaint(self, db):
        with pytest.raises(ComplaintNotFoundError):
            update_complaint_status(complaint_id=424242, status=ComplaintStatus.RESOLVED)
