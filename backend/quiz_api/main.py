"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the quiz backend. Controllers
are intentionally thin: they accept requests, delegate to services, and
return JSON responses. Service errors are rendered by a single exception
handler into the `{success, message}` envelope.

Endpoints implemented:
- GET /questions
- POST /submit
- GET /check-results
- POST /view-responses
- POST /update-feedback
- POST /reset-quiz
- GET /admin
- GET /health
"""

import json
import logging
import time
import uuid
from contextlib import contextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from . import services
from .config import settings
from .database import create_db_and_tables, get_session
from .errors import QuizError, StoreError
from .schemas import AdminIn, FeedbackIn, SubmissionIn
from .utils.question_bank import load_questions

app = FastAPI(title="Quiz Grading API")
logger = logging.getLogger("quiz_api.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

# Wide-open CORS keeps local quiz/admin pages working without extra config in dev.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

static_dir = settings.ADMIN_PAGE_PATH.parent
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    if not request.url.path.startswith("/static"):
        logger.info(
            "request_done %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
    return response


@app.exception_handler(QuizError)
async def quiz_error_handler(request: Request, exc: QuizError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("invalid request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"success": False, "message": "Solicitud inválida."})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Error interno. Por favor intenta de nuevo."},
    )


@contextmanager
def _store_errors(message: str):
    """Convert persistence failures into a generic 500 envelope."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("store_failed: %s", message)
        raise StoreError(message) from exc


def no_cache(response: Response):
    """Dependency that disables client/proxy caching on success responses."""
    response.headers.update(NO_CACHE_HEADERS)


@app.get('/questions')
def list_questions():
    """Return the question bank as stored in the static asset."""
    questions = load_questions(settings.QUESTIONS_PATH)
    return [q.model_dump(by_alias=True, exclude_none=True) for q in questions]


@app.post('/submit', dependencies=[Depends(no_cache)])
def submit(payload: SubmissionIn, request: Request, db: Session = Depends(get_session)):
    """Grade and store a participant's answers.

    When the body carries no `ip`, the peer address of the request is
    used for the per-device duplicate check.
    """
    ip = payload.ip or (request.client.host if request.client else None)
    svc = services.SubmissionService(db, settings.QUESTIONS_PATH)
    with _store_errors("Error al procesar el envío. Por favor intenta de nuevo."):
        return svc.submit(
            payload.nombre,
            payload.apellido,
            payload.correo,
            ip,
            payload.type,
            payload.answers,
            payload.justifications,
        )


@app.get('/check-results', dependencies=[Depends(no_cache)])
def check_results(correo: str = "", db: Session = Depends(get_session)):
    """Return the grading state of the submission for `correo`."""
    svc = services.SubmissionService(db, settings.QUESTIONS_PATH)
    with _store_errors("Error al consultar resultados."):
        return svc.check_results(correo)


@app.post('/view-responses', dependencies=[Depends(no_cache)])
def view_responses(payload: AdminIn, db: Session = Depends(get_session)):
    """Return every submission formatted as a single text listing."""
    svc = services.AdminService(db, settings.ADMIN_PASSWORD)
    with _store_errors("Error al leer las respuestas. Por favor intenta de nuevo."):
        listing = svc.list_all_responses(payload.password)
    return {'success': True, 'responses': listing}


@app.post('/update-feedback', dependencies=[Depends(no_cache)])
def update_feedback(payload: FeedbackIn, db: Session = Depends(get_session)):
    """Apply an administrator verdict and comment to one question."""
    svc = services.AdminService(db, settings.ADMIN_PASSWORD)
    with _store_errors("Error al actualizar corrección."):
        return svc.update_feedback(
            payload.password,
            payload.studentEmail,
            payload.questionNumber,
            payload.score,
            payload.comment,
        )


@app.post('/reset-quiz', dependencies=[Depends(no_cache)])
def reset_quiz(payload: AdminIn, db: Session = Depends(get_session)):
    """Wipe all stored submissions."""
    svc = services.AdminService(db, settings.ADMIN_PASSWORD)
    with _store_errors("Error al resetear el cuestionario. Por favor intenta de nuevo."):
        return svc.reset_all(payload.password)


@app.get('/admin')
def admin_page():
    """Serve the administrative review page."""
    return FileResponse(settings.ADMIN_PAGE_PATH, media_type="text/html", headers=NO_CACHE_HEADERS)


@app.get("/", response_class=HTMLResponse)
def home():
    """Minimal homepage for quick manual testing."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
      <meta charset="UTF-8" />
      <title>Quiz API</title>
      <style>
        body { font-family: Arial, sans-serif; margin: 32px; }
        a { color: #0a6; }
        .card { max-width: 640px; padding: 16px; border: 1px solid #ddd; border-radius: 8px; }
      </style>
    </head>
    <body>
      <div class="card">
        <h1>Quiz API</h1>
        <ul>
          <li><a href="/admin">Panel de administración</a></li>
          <li><a href="/docs">Swagger UI</a></li>
          <li><a href="/questions">Preguntas (JSON)</a></li>
        </ul>
      </div>
    </body>
    </html>
    """


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("quiz_api.main:app", host=settings.HOST, port=settings.PORT)
