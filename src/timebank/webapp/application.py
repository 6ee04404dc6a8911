"""FastAPI application exposing the TimeBank service as JSON endpoints."""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..api import ApiExporter
from ..encouragement import CannedEncouragement, EncouragementProvider, GeminiEncouragement
from ..exceptions import (
    ChildNotFoundError,
    DuplicateChildError,
    InsufficientBalanceError,
    InvalidPolicyError,
    TimeBankError,
)
from ..i18n import Translator
from ..models import Policy
from ..ops import StructuredLogger
from ..service import TimeBank
from .config import (
    CHILDREN_SPEC,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    GEMINI_TIMEOUT,
    LOCALE,
    LOG_PATH,
    SQLITE_FILE_NAME,
    parse_children,
)
from .persistence import SqlStore, make_engine


class ActivityPayload(BaseModel):
    category: str
    minutes: int
    note: Optional[str] = None


class PolicyPayload(BaseModel):
    study_multipliers: Dict[str, float]
    usage_multipliers: Dict[str, float]
    interest_rate: float
    interest_threshold_hours: float


def build_bank() -> TimeBank:
    """Create a :class:`TimeBank` wired from environment configuration."""

    translator = Translator(LOCALE)
    encouragement: EncouragementProvider
    if GEMINI_API_KEY:
        encouragement = GeminiEncouragement(
            GEMINI_API_KEY,
            model=GEMINI_MODEL,
            locale=LOCALE,
            timeout=GEMINI_TIMEOUT,
        )
    else:
        encouragement = CannedEncouragement(translator)
    return TimeBank(
        store=SqlStore(make_engine(SQLITE_FILE_NAME)),
        children=parse_children(CHILDREN_SPEC),
        encouragement=encouragement,
        translator=translator,
        logger=StructuredLogger(path=LOG_PATH),
    )


_ERROR_STATUS = {
    ChildNotFoundError: 404,
    DuplicateChildError: 409,
    InsufficientBalanceError: 409,
    InvalidPolicyError: 400,
}


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": type(exc).__name__, "detail": str(exc)}, status_code=status_code)


def create_app(bank: TimeBank | None = None) -> FastAPI:
    app = FastAPI(title="Time Bank")
    exporter = ApiExporter()
    app.state.bank = bank

    def current_bank(request: Request) -> TimeBank:
        if request.app.state.bank is None:
            request.app.state.bank = build_bank()
        return request.app.state.bank

    @app.exception_handler(TimeBankError)
    async def handle_timebank_error(_request: Request, exc: TimeBankError) -> JSONResponse:
        for error_type, status_code in _ERROR_STATUS.items():
            if isinstance(exc, error_type):
                return _error_response(status_code, exc)
        return _error_response(500, exc)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError) -> JSONResponse:
        return _error_response(400, exc)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/children")
    def list_children(request: Request) -> Dict[str, Any]:
        timebank = current_bank(request)
        return {
            "children": [
                {
                    "child_id": child.child_id,
                    "name": child.name,
                    "emoji": child.emoji,
                    "balance": timebank.balance(child.child_id),
                }
                for child in timebank.children()
            ]
        }

    @app.get("/children/{child_id}")
    def child_detail(child_id: str, request: Request) -> Dict[str, Any]:
        return exporter.child_snapshot(current_bank(request), child_id)

    @app.get("/children/{child_id}/transactions")
    def child_transactions(
        child_id: str,
        request: Request,
        limit: Optional[int] = Query(default=None, ge=0),
    ) -> Dict[str, Any]:
        history = current_bank(request).history(child_id, limit=limit)
        return {"transactions": exporter.transactions(history)}

    @app.get("/children/{child_id}/activity")
    def child_activity(
        child_id: str,
        request: Request,
        days: int = Query(default=5, ge=1, le=90),
    ) -> Dict[str, Any]:
        return {"activity": exporter.activity(current_bank(request).daily_activity(child_id, days=days))}

    @app.post("/children/{child_id}/study", status_code=201)
    def log_study(child_id: str, payload: ActivityPayload, request: Request) -> Dict[str, Any]:
        receipt = current_bank(request).log_study(child_id, payload.category, payload.minutes, note=payload.note)
        return {
            "transaction": exporter.transactions([receipt.transaction])[0],
            "message": receipt.message,
            "credentials_required": receipt.credentials_required,
        }

    @app.post("/children/{child_id}/usage", status_code=201)
    def log_usage(child_id: str, payload: ActivityPayload, request: Request) -> Dict[str, Any]:
        receipt = current_bank(request).log_usage(child_id, payload.category, payload.minutes, note=payload.note)
        return {
            "transaction": exporter.transactions([receipt.transaction])[0],
            "message": receipt.message,
            "credentials_required": receipt.credentials_required,
        }

    @app.post("/interest")
    def process_interest(request: Request, child_id: Optional[str] = None) -> Dict[str, Any]:
        added = current_bank(request).process_interest(child_id)
        return {"count": len(added), "transactions": exporter.transactions(added)}

    @app.get("/settings")
    def get_settings(request: Request) -> Dict[str, Any]:
        return exporter.policy(current_bank(request).policy)

    @app.put("/settings")
    def put_settings(payload: PolicyPayload, request: Request) -> Dict[str, Any]:
        policy = Policy.from_dict(payload.model_dump())
        return exporter.policy(current_bank(request).update_policy(policy))

    @app.delete("/settings")
    def reset_settings(request: Request) -> Dict[str, Any]:
        return exporter.policy(current_bank(request).reset_policy())

    return app


app = create_app()

__all__ = ["ActivityPayload", "PolicyPayload", "app", "build_bank", "create_app"]
