"""
Purpose:
- Shared route helpers: reach the AppContext and shape error envelopes.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from ..core.errors import SnapCaptionError
from ..core.state import AppContext

def get_ctx(request: Request) -> AppContext:
    return request.app.state.ctx

def fail(e: SnapCaptionError, **extra) -> JSONResponse:
    return JSONResponse(status_code=e.status_code, content={"ok": False, "error": str(e), **extra})
