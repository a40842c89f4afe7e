import json

import pytest
from fastapi.testclient import TestClient

from quiz_api.config import settings
from quiz_api.errors import QuestionBankError
from quiz_api.main import app
from quiz_api.utils.question_bank import load_questions, question_ids

client = TestClient(app)


def test_load_questions_reads_bank_in_order(questions_path):
    qs = load_questions(questions_path)
    assert question_ids(qs) == ['q1', 'q2']
    assert qs[0].correct_answer == 'a'
    assert qs[0].correct_option_text() == 'Cuatro'


def test_load_questions_rereads_file_on_every_call(tmp_path):
    bank = tmp_path / 'questions.json'
    bank.write_text(json.dumps([{'id': 'q1', 'options': [{'value': 'a', 'text': 'A'}], 'correctAnswer': 'a'}]), encoding='utf-8')
    assert len(load_questions(bank)) == 1
    bank.write_text('[]', encoding='utf-8')
    assert load_questions(bank) == []


def test_load_questions_missing_file(tmp_path):
    with pytest.raises(QuestionBankError):
        load_questions(tmp_path / 'nope.json')


@pytest.mark.parametrize('content', [
    '{not json',
    '{"id": "q1"}',
    '[{"id": "q1", "options": []}]',
    '[{"id": "q1", "options": [], "correctAnswer": "a"}, {"id": "q1", "options": [], "correctAnswer": "b"}]',
])
def test_load_questions_malformed(tmp_path, content):
    bank = tmp_path / 'questions.json'
    bank.write_text(content, encoding='utf-8')
    with pytest.raises(QuestionBankError):
        load_questions(bank)


def test_questions_endpoint_serves_bank():
    r = client.get('/questions')
    assert r.status_code == 200
    data = r.json()
    assert [q['id'] for q in data] == ['q1', 'q2']
    assert data[0]['correctAnswer'] == 'a'
    assert data[0]['options'][0] == {'value': 'a', 'text': 'Cuatro'}


def test_questions_endpoint_reports_missing_bank(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, 'QUESTIONS_PATH', tmp_path / 'missing.json')
    r = client.get('/questions')
    assert r.status_code == 500
    assert r.json() == {'success': False, 'message': 'Error al cargar preguntas.'}
