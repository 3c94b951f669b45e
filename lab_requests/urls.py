# lab_requests/urls.py

from django.urls import path

from .views import LabActionView, LabDetailView, LabListView, LabWorkflowDefinitionView
from .workflows.entity import LabAction

urlpatterns = [
    path("labs/", LabListView.as_view(), name="lab-list"),
    path("labs/workflow/", LabWorkflowDefinitionView.as_view(), name="lab-workflow"),
    path("labs/<uuid:pk>/", LabDetailView.as_view(), name="lab-detail"),
    path(
        "labs/<uuid:pk>/update/",
        LabActionView.as_view(lab_action=LabAction.UPDATE),
        name="lab-update",
    ),
    path(
        "labs/<uuid:pk>/complete/",
        LabActionView.as_view(lab_action=LabAction.COMPLETE),
        name="lab-complete",
    ),
    path(
        "labs/<uuid:pk>/cancel/",
        LabActionView.as_view(lab_action=LabAction.CANCEL),
        name="lab-cancel",
    ),
]
