"""Automatic grading and manual score adjustment rules."""

from typing import Dict, List, Mapping, Optional, Tuple

from ..schemas import AnswerDetail, OverrideScore, Question, QuestionId

MSG_CORRECT = "Correcta"
MSG_INCORRECT = "Incorrecta, la respuesta correcta es {}"
MSG_NOT_EVALUATED = "No evaluada (falta justificación o respuesta)"
UNANSWERED = "No respondida"


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def grade_answers(
    questions: List[Question],
    answers: Mapping[QuestionId, Optional[str]],
    justifications: Mapping[QuestionId, Optional[str]],
) -> Tuple[int, Dict[QuestionId, AnswerDetail]]:
    """Score a submission against the question bank.

    A question counts as correct only when the submitted value equals the
    correct answer and a non-empty justification accompanies it. Returns
    the score and the per-question detail in bank order.
    """
    score = 0
    detail: Dict[QuestionId, AnswerDetail] = {}
    for q in questions:
        given = answers.get(q.id)
        justified = _present(justifications.get(q.id))
        answered = _present(given)
        correct = answered and justified and given == q.correct_answer
        if correct:
            score += 1
            message = MSG_CORRECT
        elif answered and justified:
            message = MSG_INCORRECT.format(q.correct_option_text())
        else:
            message = MSG_NOT_EVALUATED
        detail[q.id] = AnswerDetail(
            value=given if answered else UNANSWERED,
            correct=correct,
            message=message,
        )
    return score, detail


def score_delta(was_correct: bool, override: OverrideScore) -> int:
    """Change to the aggregate score caused by an administrator override.

    The baseline is the auto-grade flag recorded at submission time.
    """
    if was_correct and override == OverrideScore.MARK_INCORRECT:
        return -1
    if not was_correct and override == OverrideScore.MARK_CORRECT:
        return 1
    return 0


def override_delta(was_correct: bool, override: OverrideScore, previous: Optional[OverrideScore] = None) -> int:
    """Aggregate change when replacing `previous` with `override` on one question.

    Both verdicts are measured against the auto-grade flag, so applying the
    same verdict again changes nothing.
    """
    undo = score_delta(was_correct, previous) if previous is not None else 0
    return score_delta(was_correct, override) - undo
