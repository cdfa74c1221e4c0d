from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator


class Submission(models.Model):
    registration = models.OneToOneField('registrations.Registration', related_name='submission', on_delete=models.CASCADE)
    event = models.ForeignKey('events.Event', related_name='submissions', on_delete=models.CASCADE)
    github_link = models.URLField(max_length=500, null=True, blank=True)
    file_url = models.URLField(max_length=500, null=True, blank=True)
    rating = models.IntegerField(null=True, blank=True, validators=[MinValueValidator(0), MaxValueValidator(100)])
    is_selected_for_next_round = models.BooleanField(default=False)
    result_published = models.BooleanField(default=False)
    evaluation_notes = models.TextField(null=True, blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['submitted_at']

    def __str__(self):
        return f"Submission {self.id} for {self.event.title}"
