# expense_api/api/v1/routes/google_auth.py
import json
import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from expense_api.api.deps import get_google_client, get_oauth_linker, get_settings
from expense_api.core.config import Settings
from expense_api.core.exceptions import AppError
from expense_api.core.google_auth import GoogleOAuthClient
from expense_api.core.oauth import OAuthFlow, OAuthLinker, OAuthOutcome

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/google", tags=["Google Authentication"])

SESSION_KEY = "google_oauth"

RESULT_PAGE = """<!doctype html>
<meta charset="utf-8">
<title>Signing you in…</title>
<style>
  body {{ font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif; padding: 24px; }}
</style>
<script>
  (function () {{
    var data = {payload};
    try {{
      if (window.opener) {{
        window.opener.postMessage(data, {origin});
      }}
    }} catch (e) {{}}
    try {{ window.close(); }} catch (e) {{}}
  }})();
</script>
<p>You can close this window.</p>
"""


def _script_json(value) -> str:
    """JSON that is safe to inline inside a <script> element."""
    return (
        json.dumps(value)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


def render_result_page(outcome: OAuthOutcome, frontend_origin: str) -> HTMLResponse:
    """Page that hands the result to the opener window, restricted to the frontend origin."""
    html = RESULT_PAGE.format(
        payload=_script_json(outcome.to_payload()),
        origin=_script_json(frontend_origin),
    )
    return HTMLResponse(
        content=html,
        status_code=status.HTTP_200_OK,
        headers={"Cache-Control": "no-store", "Referrer-Policy": "no-referrer"},
    )


@router.get("/start")
async def google_start(
    request: Request,
    flow: OAuthFlow = Query(OAuthFlow.login),
    settings: Settings = Depends(get_settings),
    google: GoogleOAuthClient = Depends(get_google_client),
):
    """Redirect to Google's consent screen; the flow is remembered against a one-time state."""
    if not settings.google_configured:
        raise AppError("oauth_not_configured", status.HTTP_503_SERVICE_UNAVAILABLE)

    url, state = await google.authorization_url()
    request.session[SESSION_KEY] = {"state": state, "flow": flow.value}
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


@router.get("/callback", response_class=HTMLResponse)
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    linker: OAuthLinker = Depends(get_oauth_linker),
):
    """
    Handle Google's redirect. Never redirects: the result goes to the opener
    window through postMessage so tokens stay out of URLs and history.
    """
    pending = request.session.pop(SESSION_KEY, None)

    if not pending or not state or not secrets.compare_digest(str(pending.get("state", "")).encode(), state.encode()):
        outcome = linker.rejected_state()
    elif error:
        logger.warning(f"Google returned an error on callback: {error}")
        outcome = OAuthOutcome.failure()
    else:
        outcome = await linker.complete(code, OAuthFlow(pending.get("flow", OAuthFlow.login.value)))

    logger.info(f"Google callback finished with status={outcome.status.value}")
    return render_result_page(outcome, settings.FRONTEND_ORIGIN)
