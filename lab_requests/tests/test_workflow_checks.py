from lab_requests.checks.workflow_consistency import check_lab_workflow


def test_lab_workflow_system_check_passes():
    assert check_lab_workflow(None) == []


def test_lab_workflow_system_check_flags_status_mismatch(monkeypatch):
    from lab_requests.models import LabRequest

    monkeypatch.setattr(
        LabRequest,
        "STATUS_CHOICES",
        LabRequest.STATUS_CHOICES + [("archived", "Archived")],
    )

    errors = check_lab_workflow(None)
    assert [e.id for e in errors] == ["lab_requests.E001"]
