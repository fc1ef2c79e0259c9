"""
Management command to create demo data for trying the API.

Usage:
    python manage.py seed_demo_data

This creates:
- Shop SHOP001 with rice, wheat and sugar stock
- One admin, one shopkeeper and three cardholders (AAY, PHH, BPL)
"""

from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, Role, CardType
from apps.shops.models import Shop
from apps.stocks.models import StockItem


STOCK_ITEMS = [
    ('rice', 'Rice', 'चावल', Decimal('500')),
    ('wheat', 'Wheat', 'गेहूं', Decimal('300')),
    ('sugar', 'Sugar', 'चीनी', Decimal('100')),
]

USERS = [
    ('admin@ration.local', 'Admin', Role.ADMIN, None, None, None),
    ('shopkeeper@ration.local', 'Ramesh Kumar', Role.SHOPKEEPER, None, None, None),
    ('aay@ration.local', 'Sita Devi', Role.CARDHOLDER, CardType.AAY, 5, 'AAY0000001'),
    ('phh@ration.local', 'Mohan Lal', Role.CARDHOLDER, CardType.PHH, 4, 'PHH0000001'),
    ('bpl@ration.local', 'Geeta Sharma', Role.CARDHOLDER, CardType.BPL, 3, 'BPL0000001'),
]


class Command(BaseCommand):
    help = 'Create a demo shop, stock and one user per role'

    def add_arguments(self, parser):
        parser.add_argument(
            '--shop-id',
            default=settings.DEFAULT_SHOP_ID,
            help='ID of the demo shop (default: DEFAULT_SHOP_ID)',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        shop, created = Shop.objects.get_or_create(
            id=options['shop_id'],
            defaults={
                'name': 'Fair Price Shop 1',
                'district': 'Lucknow',
                'address': 'Main Market, Hazratganj',
                'contact_email': 'shop1@ration.local',
                'working_hours': '9:00 AM - 5:00 PM',
            },
        )
        self.stdout.write(f"{'Created' if created else 'Found'} shop {shop.id}")

        for code, name, hindi_name, quantity in STOCK_ITEMS:
            StockItem.objects.get_or_create(
                shop=shop,
                item_code=code,
                defaults={
                    'item_name': name,
                    'item_name_hindi': hindi_name,
                    'quantity': quantity,
                    'government_allocated': quantity,
                },
            )

        for email, name, role, card_type, family_size, card_number in USERS:
            user, created = User.objects.get_or_create(
                email=email,
                defaults={
                    'name': name,
                    'role': role,
                    'shop': None if role == Role.ADMIN else shop,
                    'card_type': card_type,
                    'family_size': family_size,
                    'ration_card_number': card_number,
                    'is_staff': role == Role.ADMIN,
                },
            )
            if created:
                user.set_unusable_password()
                user.save(update_fields=['password'])
            self.stdout.write(f"  - {user.email} ({user.role})")

        self.stdout.write(self.style.SUCCESS('Demo data ready. Log in with an emailed code.'))
