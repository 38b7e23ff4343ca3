"""
Core models for the retail POS platform.
"""

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class PosUserManager(UserManager):
    """User manager that gives superusers the administrator role."""

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("role", User.ADMINISTRATOR)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    """
    Extended user model with a single POS role.

    Every user holds exactly one role. The role decides which API
    operations are reachable, see ROLE_PERMISSIONS.
    """

    # Role choices
    ADMINISTRATOR = "administrator"
    MANAGER = "manager"
    CASHIER = "cashier"

    ROLE_CHOICES = [
        (ADMINISTRATOR, "Administrator"),
        (MANAGER, "Manager"),
        (CASHIER, "Cashier"),
    ]

    # Permission names granted to each role. "<area>.*" grants every action in an area.
    ROLE_PERMISSIONS = {
        ADMINISTRATOR: [
            "users.*",
            "products.*",
            "inventory.*",
            "transactions.*",
            "reports.*",
            "settings.*",
            "feedback.*",
            "farewell_messages.*",
            "notifications.*",
        ],
        MANAGER: [
            "products.view",
            "products.create",
            "products.edit",
            "products.delete",
            "inventory.*",
            "transactions.*",
            "reports.view",
            "feedback.view",
            "feedback.create",
            "farewell_messages.*",
            "notifications.view",
        ],
        CASHIER: [
            "products.view",
            "inventory.view",
            "transactions.create",
            "transactions.view",
            "transactions.cancel",
            "transactions.receipt",
            "feedback.create",
            "farewell_messages.random",
        ],
    }

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=CASHIER,
        help_text="User's role in the store",
    )

    phone = models.CharField(
        max_length=20,
        blank=True,
        help_text="User's phone number",
    )

    objects = PosUserManager()

    class Meta:
        db_table = "users"
        ordering = ["username"]
        verbose_name = "User"
        verbose_name_plural = "Users"
        indexes = [
            models.Index(fields=["role", "is_active"], name="user_role_active_idx"),
        ]

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    def is_cashier(self):
        """Check if user is a cashier."""
        return self.role == self.CASHIER

    def is_manager_or_above(self):
        return self.role in [self.ADMINISTRATOR, self.MANAGER]

    def get_permissions(self):
        """Return the permission names granted by the user's role."""
        return list(self.ROLE_PERMISSIONS.get(self.role, []))

    def has_permission(self, permission):
        """
        Check whether the user's role grants ``permission``.

        Matches exact names, a global "*" and area wildcards such as
        "products.*" for "products.edit".
        """
        granted = self.ROLE_PERMISSIONS.get(self.role, [])
        if permission in granted or "*" in granted:
            return True
        area = permission.split(".", 1)[0]
        return f"{area}.*" in granted
