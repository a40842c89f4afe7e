"""Plain-text rendering of stored submissions for the admin listing."""

from typing import Iterable

from ..models import Submission

EMPTY_LISTING = "No hay respuestas disponibles."
SEPARATOR = "-" * 40


def _label(question_id: str) -> str:
    # "q3" -> "3"
    return question_id.replace("q", "", 1)


def format_submission(row: Submission) -> str:
    """Render one submission as a delimited block."""
    answers = row.answers or {}
    justifications = row.justifications or {}
    parts = [
        "",
        SEPARATOR,
        f"Envío: {row.submission_type}",
        f"Fecha: {row.submitted_at}",
        f"Nombre: {row.first_name}",
        f"Apellido: {row.last_name}",
        f"Correo: {row.email}",
        f"IP: {row.ip or ''}",
        f"Puntuación: {row.score}/{row.total}",
    ]
    for qid, item in answers.items():
        n = _label(qid)
        parts.append("")
        parts.append(f"Pregunta {n}: {item.get('value')} ({item.get('message')})")
        parts.append(f"Justificación {n}: {justifications.get(qid) or 'No proporcionada'}")
        parts.append(f"Comentario {n}: {item.get('comment') or 'Sin comentario'}")
        parts.append("")
    parts.append(f"Corregido: {'Sí' if row.corrected else 'No'}")
    parts.append(SEPARATOR)
    parts.append("")
    return "\n".join(parts)


def format_responses(rows: Iterable[Submission]) -> str:
    """Concatenate every submission block, or the empty-store sentinel."""
    blocks = [format_submission(r) for r in rows]
    return "".join(blocks) if blocks else EMPTY_LISTING
