from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.core.models import User


class Notification(models.Model):
    """
    Model to store notifications for users.
    Supports in-app notifications with read/unread status.
    """

    INFO = "INFO"
    WARNING = "WARNING"
    LOW_STOCK = "LOW_STOCK"
    TRANSACTIONAL = "TRANSACTIONAL"
    SYSTEM = "SYSTEM"

    NOTIFICATION_TYPES = [
        (INFO, _("Information")),
        (WARNING, _("Warning")),
        (LOW_STOCK, _("Low Stock Alert")),
        (TRANSACTIONAL, _("Transactional")),
        (SYSTEM, _("System Notification")),
    ]

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="notifications",
        help_text=_("User who will receive this notification"),
    )
    title = models.CharField(max_length=255, help_text=_("Notification title/subject"))
    message = models.TextField(help_text=_("Notification message content"))
    notification_type = models.CharField(
        max_length=20,
        choices=NOTIFICATION_TYPES,
        default=INFO,
        help_text=_("Type of notification for styling and filtering"),
    )
    is_read = models.BooleanField(
        default=False, help_text=_("Whether the user has read this notification")
    )
    created_at = models.DateTimeField(
        auto_now_add=True, help_text=_("When the notification was created")
    )
    read_at = models.DateTimeField(
        null=True, blank=True, help_text=_("When the notification was marked as read")
    )

    # Link back to the record that caused the notification
    action_url = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("API path of the related record, e.g. /api/products/12/"),
    )

    class Meta:
        db_table = "notifications_notification"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="notif_user_created_idx"),
            models.Index(fields=["user", "is_read", "-created_at"], name="notif_user_read_idx"),
            models.Index(
                fields=["user", "notification_type", "-created_at"], name="notif_user_type_idx"
            ),
        ]
        verbose_name = _("Notification")
        verbose_name_plural = _("Notifications")

    def __str__(self):
        return f"{self.title} - {self.user.username}"

    def mark_as_read(self):
        """Mark notification as read and set read timestamp"""
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=["is_read", "read_at"])


class EmailNotification(models.Model):
    """
    Model to track outgoing emails and their delivery status.

    Receipts go to customers who have no user account, so ``user`` is optional.
    """

    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"

    STATUS_CHOICES = [
        (PENDING, _("Pending")),
        (SENT, _("Sent")),
        (FAILED, _("Failed")),
    ]

    RECEIPT = "RECEIPT"
    LOW_STOCK = "LOW_STOCK"
    SYSTEM = "SYSTEM"

    EMAIL_TYPES = [
        (RECEIPT, _("Transaction Receipt")),
        (LOW_STOCK, _("Low Stock Alert")),
        (SYSTEM, _("System")),
    ]

    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="email_notifications",
        help_text=_("Staff user who received this email, if any"),
    )
    notification = models.OneToOneField(
        Notification,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="email_notification",
        help_text=_("Associated in-app notification"),
    )

    # Email details
    subject = models.CharField(max_length=255, help_text=_("Email subject"))
    to_email = models.EmailField(help_text=_("Recipient email address"))
    from_email = models.EmailField(help_text=_("Sender email address"))
    template_name = models.CharField(max_length=100, blank=True, help_text=_("Template used"))
    email_type = models.CharField(
        max_length=20, choices=EMAIL_TYPES, default=SYSTEM, help_text=_("Type of email")
    )

    # Delivery tracking
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING,
        help_text=_("Current delivery status"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)
    error_message = models.TextField(blank=True, help_text=_("Error message if delivery failed"))

    class Meta:
        db_table = "notifications_email"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="email_status_idx"),
            models.Index(fields=["email_type", "-created_at"], name="email_type_created_idx"),
        ]
        verbose_name = _("Email Notification")
        verbose_name_plural = _("Email Notifications")

    def __str__(self):
        return f"{self.subject} - {self.to_email} ({self.status})"

    def update_status(self, status, timestamp=None, error_message=""):
        """Update email status with appropriate timestamp"""
        if timestamp is None:
            timestamp = timezone.now()

        self.status = status

        if status == self.SENT:
            self.sent_at = timestamp
        elif status == self.FAILED:
            self.failed_at = timestamp
            self.error_message = error_message

        self.save(update_fields=["status", "sent_at", "failed_at", "error_message"])
