from django.urls import path
from .views import SubmitProjectView, ReviewSubmissionsView, PublishResultsView, EvaluateSubmissionView

urlpatterns = [
    path('events/<int:event_id>/', SubmitProjectView.as_view(), name='submit_project'),
    path('events/<int:event_id>/review/', ReviewSubmissionsView.as_view(), name='review_submissions'),
    path('events/<int:event_id>/publish/', PublishResultsView.as_view(), name='publish_results'),
    path('<int:submission_id>/evaluate/', EvaluateSubmissionView.as_view(), name='evaluate_submission'),
]
