from django.db import models
import uuid


class User(models.Model):
    """Person behind a device, created the first time the device logs in."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    device_id = models.CharField(max_length=128, unique=True, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)

    # Group the user last created or was admitted to
    current_group = models.ForeignKey(
        'groups.Group',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='current_users'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['created_at'], name='users_created_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return self.get_display_name()

    def get_display_name(self):
        """Return display name or a device id prefix."""
        return self.display_name or f"Device {self.device_id[:8]}"
