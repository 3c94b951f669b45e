# lab_requests/tests/conftest.py

from __future__ import annotations

import uuid
from datetime import datetime, timezone as dt_timezone
from typing import Any, Callable, Dict, List, Optional, Set

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission as AuthPermission
from rest_framework.test import APIClient

from lab_requests.models import LabRequest, Patient
from lab_requests.workflows.entity import Lab, LabStatus
from lab_requests.workflows.exceptions import NotFoundError, PersistenceError
from lab_requests.workflows.ports import AuthorizationGate, Clock, LabRepository


REQUESTED_ON = datetime(2020, 3, 30, 4, 43, 20, 102000, tzinfo=dt_timezone.utc)
T0 = datetime(2021, 6, 1, 12, 0, 0, tzinfo=dt_timezone.utc)


def _rand(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


# ===============================================================
# Port fakes (no database)
# ===============================================================

class FixedClock(Clock):
    """Always returns the same instant and counts reads."""

    def __init__(self, instant: datetime = T0):
        self.instant = instant
        self.reads = 0

    def now(self) -> datetime:
        self.reads += 1
        return self.instant


class InMemoryLabRepository(LabRepository):
    def __init__(self, *labs: Lab):
        self.labs: Dict[str, Lab] = {lab.id: lab for lab in labs}
        self.saved: List[Lab] = []
        self.fail_saves = False

    def find(self, lab_id: str) -> Lab:
        try:
            return self.labs[lab_id]
        except KeyError:
            raise NotFoundError(f"Lab {lab_id} does not exist.")

    def save_or_update(self, lab: Lab) -> Lab:
        self.saved.append(lab)
        if self.fail_saves:
            raise PersistenceError(f"Lab {lab.id} could not be saved.")
        self.labs[lab.id] = lab
        return lab


class StaticAuthorizationGate(AuthorizationGate):
    def __init__(self, granted: Optional[Set[str]] = None):
        self.granted = set(granted or ())

    def has_permission(self, principal, permission: str) -> bool:
        return permission in self.granted


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def mock_lab() -> Lab:
    return Lab(
        id="12456",
        code="L-1234",
        patient="1234",
        type="lab type",
        status=LabStatus.REQUESTED,
        notes=("lab notes",),
        requested_on=REQUESTED_ON,
    )


@pytest.fixture
def repository(mock_lab) -> InMemoryLabRepository:
    return InMemoryLabRepository(mock_lab)


# ===============================================================
# Database fixtures
# ===============================================================

def _grant(user, *codenames: str):
    perms = AuthPermission.objects.filter(
        content_type__app_label="lab_requests",
        codename__in=codenames,
    )
    user.user_permissions.add(*perms)
    # has_perm caches per instance; hand back a fresh one
    return get_user_model().objects.get(pk=user.pk)


def _make_user(username: str):
    User = get_user_model()
    user, _created = User.objects.get_or_create(username=username)
    user.set_password("pass123")
    user.save(update_fields=["password"])
    return user


@pytest.fixture
def user_viewer(db):
    return _grant(_make_user("viewer"), "view_labrequest")


@pytest.fixture
def user_clinician(db):
    return _grant(
        _make_user("clinician"),
        "view_labrequest",
        "complete_lab",
        "cancel_lab",
    )


@pytest.fixture
def user_no_perms(db):
    return _make_user("outsider")


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def patient(db) -> Patient:
    return Patient.objects.create(code=_rand("P"), full_name="test")


@pytest.fixture
def lab_factory(db, patient) -> Callable[..., LabRequest]:
    """
    Creates LabRequest rows. Non-requested statuses are written with
    a queryset update so the model write guard is not involved.
    """

    def _factory(*, status: str = LabStatus.REQUESTED, **extra: Any) -> LabRequest:
        kwargs: Dict[str, Any] = {
            "patient": patient,
            "code": _rand("L"),
            "type": "lab type",
            "notes": ["lab notes"],
            "requested_on": REQUESTED_ON,
        }
        kwargs.update(extra)
        row = LabRequest.objects.create(**kwargs)

        if status == LabStatus.COMPLETED:
            LabRequest.objects.filter(pk=row.pk).update(status=status, completed_on=T0, result="done")
        elif status == LabStatus.CANCELED:
            LabRequest.objects.filter(pk=row.pk).update(status=status, canceled_on=T0)

        row.refresh_from_db()
        return row

    return _factory
