from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


DEFAULT_FAMILY_SIZE = 4


class Role(models.TextChoices):
    CARDHOLDER = 'cardholder', 'Cardholder'
    SHOPKEEPER = 'shopkeeper', 'Shopkeeper'
    ADMIN = 'admin', 'Admin'


class CardType(models.TextChoices):
    AAY = 'AAY', 'Antyodaya Anna Yojana'
    PHH = 'PHH', 'Priority Household'
    BPL = 'BPL', 'Below Poverty Line'
    APL = 'APL', 'Above Poverty Line'


class UserManager(BaseUserManager):
    """Custom user manager for email-based (OTP) authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', Role.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Cardholder, shopkeeper or administrator. Never hard-deleted."""

    email = models.EmailField(unique=True, max_length=255)
    name = models.CharField(max_length=150, blank=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CARDHOLDER)
    language = models.CharField(max_length=20, default='english')

    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users'
    )

    # Ration card (cardholders only)
    ration_card_number = models.CharField(max_length=32, unique=True, null=True, blank=True)
    card_type = models.CharField(max_length=3, choices=CardType.choices, null=True, blank=True)
    family_size = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)]
    )

    # Contact
    mobile_number = models.CharField(max_length=15, blank=True)
    address = models.TextField(blank=True)
    district = models.CharField(max_length=100, blank=True)
    pincode = models.CharField(max_length=10, blank=True)

    # Soft states
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    is_flagged = models.BooleanField(default=False)
    flag_reason = models.CharField(max_length=255, blank=True, null=True)
    flagged_by = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='flagged_users'
    )
    flagged_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['role', 'shop'], name='users_role_shop_idx'),
            models.Index(fields=['shop', 'card_type', 'is_active'], name='users_shop_card_active_idx'),
        ]

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return name or email prefix."""
        return self.name or self.email.split('@')[0]

    @property
    def effective_family_size(self):
        """Family size used for entitlements; absent sizes count as 4."""
        return self.family_size or DEFAULT_FAMILY_SIZE

    def flag(self, *, flagged_by, reason=None):
        self.is_flagged = True
        self.flag_reason = reason or 'Suspicious activity'
        self.flagged_by = flagged_by
        self.flagged_at = timezone.now()
        self.save(update_fields=['is_flagged', 'flag_reason', 'flagged_by', 'flagged_at', 'updated_at'])

    def unflag(self):
        self.is_flagged = False
        self.flag_reason = None
        self.flagged_by = None
        self.flagged_at = None
        self.save(update_fields=['is_flagged', 'flag_reason', 'flagged_by', 'flagged_at', 'updated_at'])


class VerificationCode(models.Model):
    """One-time login code. Only the hash of the code is stored."""

    email = models.EmailField(max_length=255)
    code = models.CharField(max_length=255)
    expires_at = models.DateTimeField()
    attempts = models.PositiveIntegerField(default=0)
    verified_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'verification_codes'
        indexes = [
            models.Index(fields=['email', 'expires_at'], name='vcodes_email_expires_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        state = 'verified' if self.verified_at else 'pending'
        return f"{self.email} ({state})"

    def is_usable(self, now=None):
        now = now or timezone.now()
        return self.verified_at is None and self.expires_at > now
