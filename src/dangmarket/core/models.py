"""Core models for the storefront."""

import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models

from dangmarket.store.pricing.types import AccountProfile


class UserManager(BaseUserManager):
    """Custom user manager using email as the unique identifier."""

    def create_user(self, email, password=None, **extra_fields):
        """Create and save a regular user with the given email and password."""
        if not email:
            raise ValueError("Users must have an email address")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Create and save a superuser with the given email and password."""
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Storefront customer or admin, identified by email.

    Business accounts get the wholesale discount and may pay on credit up
    to ``credit_limit``.
    """

    class CreditPaymentTerms(models.TextChoices):
        MONTHLY = "monthly", "Monthly billing"
        PER_BILL = "per_bill", "Pay per bill"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    username = None  # Remove username field
    phone = models.CharField(max_length=32, blank=True)

    is_business_account = models.BooleanField(default=False)
    credit_limit = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    current_credit_balance = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0")
    )
    credit_payment_terms = models.CharField(
        max_length=16,
        choices=CreditPaymentTerms.choices,
        null=True,
        blank=True,
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Get display name for the user."""
        if self.first_name or self.last_name:
            return f"{self.first_name} {self.last_name}".strip()
        return self.email.split("@")[0]

    def get_account_profile(self) -> AccountProfile:
        """Snapshot of the pricing-relevant account attributes."""
        return AccountProfile(
            is_business_account=self.is_business_account,
            credit_limit=self.credit_limit,
            current_credit_balance=self.current_credit_balance,
            credit_payment_terms=self.credit_payment_terms or None,
        )
