from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from decimal import Decimal
import uuid


class CelebrationStatus(models.TextChoices):
    UPCOMING = 'upcoming', 'Upcoming'
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'


TERMINAL_STATUSES = [CelebrationStatus.COMPLETED]


class AssignmentReason(models.TextChoices):
    AUTO_ROTATION = 'auto_rotation', 'Automatic rotation'
    MANUAL_REASSIGN = 'manual_reassign', 'Manual reassignment'
    MEMBER_LEFT = 'member_left', 'Leader left the group'


class Celebration(models.Model):
    """A celebrant's event within one group, coordinated by a Gift Leader."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='celebrations'
    )
    celebrant = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='celebrations_as_celebrant'
    )

    # Current Gift Leader pointer (single writer, history is audit only)
    gift_leader = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='celebrations_as_leader'
    )

    event_date = models.DateField()
    year = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20,
        choices=CelebrationStatus.choices,
        default=CelebrationStatus.UPCOMING
    )

    # Optional pooled contribution target
    target_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'celebrations'
        indexes = [
            models.Index(fields=['group', 'event_date'], name='celeb_group_date_idx'),
            models.Index(fields=['celebrant', 'event_date'], name='celeb_celebrant_date_idx'),
            models.Index(fields=['status'], name='celeb_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(gift_leader__isnull=True) | ~Q(gift_leader=F('celebrant')),
                name='celebration_leader_not_celebrant',
            ),
        ]
        ordering = ['event_date', 'created_at']

    def __str__(self):
        return f"{self.celebrant} - {self.event_date} ({self.status})"

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES


class GiftLeaderHistory(models.Model):
    """Append-only audit trail of Gift Leader assignments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    celebration = models.ForeignKey(
        Celebration,
        on_delete=models.CASCADE,
        related_name='leader_history'
    )
    assigned_to = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='leader_assignments'
    )
    # NULL means the assignment was automatic
    assigned_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='leader_assignments_made'
    )
    reason = models.CharField(max_length=20, choices=AssignmentReason.choices)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'gift_leader_history'
        indexes = [
            models.Index(fields=['celebration', 'created_at'], name='leader_history_celeb_idx'),
        ]
        ordering = ['-created_at']
        verbose_name_plural = 'gift leader history'

    def __str__(self):
        return f"{self.celebration_id}: {self.assigned_to_id} ({self.reason})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Gift Leader history entries cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Gift Leader history entries cannot be deleted")


class CelebrationContribution(models.Model):
    """One member's free-form contribution toward a celebration's gift fund."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    celebration = models.ForeignKey(
        Celebration,
        on_delete=models.CASCADE,
        related_name='contributions'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='celebration_contributions'
    )
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'celebration_contributions'
        unique_together = [['celebration', 'user']]
        indexes = [
            models.Index(fields=['celebration', 'amount'], name='contrib_celeb_amount_idx'),
        ]
        ordering = ['-amount', 'created_at']

    def __str__(self):
        return f"{self.user} gives {self.amount} to {self.celebration_id}"
