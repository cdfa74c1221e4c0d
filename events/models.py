from django.db import models
from django.core.validators import MinValueValidator


class Event(models.Model):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    APPROVAL_CHOICES = [
        (PENDING, 'Pending'),
        (APPROVED, 'Approved'),
        (REJECTED, 'Rejected'),
    ]

    SUBMISSION_NONE = 'none'
    SUBMISSION_GITHUB = 'github_link'
    SUBMISSION_ZIP = 'zip_file'
    SUBMISSION_BOTH = 'both'

    SUBMISSION_CHOICES = [
        (SUBMISSION_NONE, 'No submission'),
        (SUBMISSION_GITHUB, 'GitHub link'),
        (SUBMISSION_ZIP, 'Zip file'),
        (SUBMISSION_BOTH, 'GitHub link and zip file'),
    ]

    title = models.CharField(max_length=200)
    organizer = models.CharField(max_length=100)
    organizer_profile = models.ForeignKey('accounts.Organizer', related_name='events', null=True, blank=True, on_delete=models.SET_NULL)
    location = models.CharField(max_length=300)
    event_type = models.CharField(max_length=100, default='Hackathon')
    event_date = models.DateTimeField()
    registration_deadline = models.DateTimeField()
    team_size_min = models.IntegerField('minimum team size', default=1, validators=[MinValueValidator(1)])
    team_size_max = models.IntegerField('maximum team size', default=1, validators=[MinValueValidator(1)])
    total_slots = models.IntegerField(default=100, validators=[MinValueValidator(1)])
    registered_count = models.IntegerField(default=0)
    registration_fee = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    prize_money = models.IntegerField(null=True, blank=True)
    poster_url = models.URLField(max_length=500, null=True, blank=True)
    description = models.TextField()
    eligibility = models.TextField(default='Everyone can apply')
    stages = models.TextField(null=True, blank=True)
    details = models.TextField(null=True, blank=True)
    dates_deadlines = models.TextField(null=True, blank=True)
    prizes = models.TextField(null=True, blank=True)
    tags = models.JSONField(default=list, blank=True)
    custom_sections = models.JSONField(default=list, blank=True)
    submission_type = models.CharField(max_length=20, choices=SUBMISSION_CHOICES, default=SUBMISSION_NONE)
    approval_status = models.CharField(max_length=10, choices=APPROVAL_CHOICES, default=PENDING)
    rejection_reason = models.TextField(null=True, blank=True)
    impressions = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['approval_status', 'event_date'], name='event_status_date_idx'),
            models.Index(fields=['-created_at'], name='event_created_idx'),
        ]
        ordering = ['event_date']

    def __str__(self):
        return self.title


class Wishlist(models.Model):
    user = models.ForeignKey('accounts.User', related_name='wishlist', on_delete=models.CASCADE)
    event = models.ForeignKey(Event, related_name='wishlisted_by', on_delete=models.CASCADE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['user', 'event']
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.email} wishlisted {self.event.title}"


class RecentlyViewed(models.Model):
    user = models.ForeignKey('accounts.User', related_name='recently_viewed', on_delete=models.CASCADE)
    event = models.ForeignKey(Event, related_name='viewed_by', on_delete=models.CASCADE)
    viewed_at = models.DateTimeField()

    class Meta:
        unique_together = ['user', 'event']
        ordering = ['-viewed_at']
        verbose_name_plural = 'Recently viewed'

    def __str__(self):
        return f"{self.user.email} viewed {self.event.title}"
