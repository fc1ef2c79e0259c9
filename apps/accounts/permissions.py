"""
Role-based permission classes shared by all apps.

Roles are a closed set (``Role``); each class below states which roles
may pass. Object-level ownership checks live in the views that need them.
"""
from rest_framework.permissions import BasePermission

from .models import Role


class HasRole(BasePermission):
    """Base class: allow authenticated users whose role is in ``allowed_roles``."""

    allowed_roles = frozenset()
    message = 'Insufficient permissions'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.role in self.allowed_roles


class IsCardholder(HasRole):
    allowed_roles = frozenset({Role.CARDHOLDER})
    message = 'Only cardholders can perform this action.'


class IsShopkeeperOrAdmin(HasRole):
    allowed_roles = frozenset({Role.SHOPKEEPER, Role.ADMIN})
    message = 'Only shopkeepers and administrators can perform this action.'


class IsAdmin(HasRole):
    allowed_roles = frozenset({Role.ADMIN})
    message = 'Only administrators can perform this action.'


def can_access_shop(user, shop_id) -> bool:
    """Admins reach every shop; everyone else only their own."""
    if user.role == Role.ADMIN:
        return True
    return user.shop_id is not None and str(user.shop_id) == str(shop_id)
