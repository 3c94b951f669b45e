# lab_requests/workflows/ports.py

"""
Collaborator contracts consumed by the lab workflow.

The workflow only talks to persistence, authorization and time through
these interfaces. Django-backed implementations live in
lab_requests.repositories and lab_requests.permissions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from django.utils import timezone

from lab_requests.workflows.entity import Lab


class LabRepository(ABC):
    @abstractmethod
    def find(self, lab_id: str) -> Lab:
        """Return the Lab or raise NotFoundError."""

    @abstractmethod
    def save_or_update(self, lab: Lab) -> Lab:
        """
        Persist `lab` and return the stored value, or raise PersistenceError.

        Returning means the write is confirmed.
        """


class AuthorizationGate(ABC):
    @abstractmethod
    def has_permission(self, principal, permission: str) -> bool:
        ...


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    def now(self) -> datetime:
        return timezone.now()
