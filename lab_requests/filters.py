# lab_requests/filters.py
import django_filters as df

from .models import LabRequest


class LabRequestFilter(df.FilterSet):
    status = df.ChoiceFilter(choices=LabRequest.STATUS_CHOICES)
    patient = df.UUIDFilter(field_name="patient_id")
    code = df.CharFilter(field_name="code", lookup_expr="icontains")
    type = df.CharFilter(field_name="type", lookup_expr="icontains")
    requested_on = df.DateFromToRangeFilter()

    class Meta:
        model = LabRequest
        fields = ["status", "patient", "code", "type", "requested_on"]
