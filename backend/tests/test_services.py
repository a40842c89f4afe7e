import pytest

from quiz_api import services
from quiz_api.errors import AuthError, ConflictError, NotFoundError, ValidationError
from quiz_api.schemas import OverrideScore

PASSWORD = 'test-admin'


def _submit(svc, email='ana@example.com', ip='10.0.0.1', answers=None, justifications=None, submission_type='manual'):
    return svc.submit(
        'Ana', 'Pérez', email, ip, submission_type,
        answers if answers is not None else {'q1': 'a', 'q2': 'b'},
        justifications if justifications is not None else {'q1': 'x', 'q2': 'y'},
    )


def test_submit_stores_normalized_record(session, questions_path):
    svc = services.SubmissionService(session, questions_path)
    _submit(svc, submission_type='manual')
    _submit(svc, email='beto@example.com', ip=' ', submission_type='automatic')
    rows = svc.repo.list_all()
    assert [r.submission_type for r in rows] == ['Manual', 'Automático']
    assert rows[0].ip == '10.0.0.1'
    # blank ip is stored as unknown and never matches another submission
    assert rows[1].ip is None
    assert rows[0].id < rows[1].id
    assert rows[0].corrected is False
    assert rows[0].score == 2


def test_submit_trims_required_fields(session, questions_path):
    svc = services.SubmissionService(session, questions_path)
    with pytest.raises(ValidationError):
        svc.submit('  ', 'Pérez', 'ana@example.com', '10.0.0.1', None, {}, {})
    assert svc.repo.list_all() == []


def test_unique_constraint_closes_check_then_insert_race(session, questions_path, monkeypatch):
    svc = services.SubmissionService(session, questions_path)
    _submit(svc)
    # simulate a concurrent request that passed the existence check first
    monkeypatch.setattr(svc.repo, 'find_by_email_or_ip', lambda email, ip: None)
    with pytest.raises(ConflictError):
        _submit(svc, ip='10.0.0.9')
    with pytest.raises(ConflictError):
        _submit(svc, email='otra@example.com')
    assert len(svc.repo.list_all()) == 1


def test_check_results_not_found(session, questions_path):
    svc = services.SubmissionService(session, questions_path)
    with pytest.raises(NotFoundError):
        svc.check_results('nadie@example.com')
    with pytest.raises(NotFoundError):
        svc.check_results(None)


def test_admin_without_configured_password_rejects_everything(session):
    admin = services.AdminService(session, None)
    with pytest.raises(AuthError):
        admin.list_all_responses(None)
    with pytest.raises(AuthError):
        admin.list_all_responses('')


def test_update_feedback_baseline_is_auto_grade(session, questions_path):
    svc = services.SubmissionService(session, questions_path)
    admin = services.AdminService(session, PASSWORD)
    _submit(svc)
    admin.update_feedback(PASSWORD, 'ana@example.com', 'q1', OverrideScore.MARK_INCORRECT, 'no')
    admin.update_feedback(PASSWORD, 'ana@example.com', 'q1', OverrideScore.MARK_INCORRECT, 'no')
    assert svc.check_results('ana@example.com')['score'] == 1
    # returning to the auto-graded verdict restores the point exactly once
    admin.update_feedback(PASSWORD, 'ana@example.com', 'q1', OverrideScore.MARK_CORRECT, 'sí')
    admin.update_feedback(PASSWORD, 'ana@example.com', 'q1', OverrideScore.MARK_CORRECT, 'sí')
    res = svc.check_results('ana@example.com')
    assert res['score'] == 2
    assert res['answers']['q1']['score'] == 1
    assert res['answers']['q1']['comment'] == 'sí'
    assert res['answers']['q1']['correct'] is True
    assert res['corrected'] is True


def test_reset_then_listing_is_sentinel(session, questions_path):
    svc = services.SubmissionService(session, questions_path)
    admin = services.AdminService(session, PASSWORD)
    _submit(svc)
    assert admin.reset_all(PASSWORD)['success'] is True
    assert admin.list_all_responses(PASSWORD) == 'No hay respuestas disponibles.'
