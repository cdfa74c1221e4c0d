from django.db import models
from accounts.validators import phone_validator


class Registration(models.Model):
    REGISTERED = 'registered'

    PAYMENT_PENDING = 'pending'
    PAYMENT_COMPLETED = 'completed'

    PAYMENT_CHOICES = [
        (PAYMENT_PENDING, 'Pending'),
        (PAYMENT_COMPLETED, 'Completed'),
    ]

    user = models.ForeignKey('accounts.User', related_name='registrations', on_delete=models.CASCADE)
    event = models.ForeignKey('events.Event', related_name='registrations', on_delete=models.CASCADE)
    team_name = models.CharField(max_length=100, null=True, blank=True)
    status = models.CharField(max_length=20, default=REGISTERED)
    payment_status = models.CharField(max_length=10, choices=PAYMENT_CHOICES, default=PAYMENT_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['user', 'event']
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.email} - {self.event.title}"

    @property
    def leader(self):
        return next((member for member in self.members.all() if member.is_leader), None)


class TeamMember(models.Model):
    registration = models.ForeignKey(Registration, related_name='members', on_delete=models.CASCADE)
    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=255)
    phone = models.CharField(max_length=10, validators=[phone_validator])
    college_name = models.CharField(max_length=200)
    photo_url = models.URLField(max_length=500, null=True, blank=True)
    is_leader = models.BooleanField(default=False)
    additional_info = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-is_leader', 'id']

    def __str__(self):
        return f"{self.name} ({self.registration.event.title})"
