import logging
from fastapi import APIRouter, Depends, Query, Request
from ..auth import require_apify_token
from ..config import Settings, get_settings
from ..errors import EmptyResultError, InputError, InvocationError, MediaLinkError
from ..models import ErrorResponse, MediaResponse
from ..services.apify_client import ApifyClient
from ..services.extractor import extract_media_url
from ..services.invoker import default_strategies, invoke_with_alternate
from ..services.redirects import is_short_link, resolve_redirect

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def create_router(platform: str) -> APIRouter:
    """One GET route per platform, all sharing the same resolve/invoke/extract flow."""
    router = APIRouter(prefix=f"/api/{platform}", tags=[platform])

    @router.get("", response_model=MediaResponse, responses=ERROR_RESPONSES)
    async def fetch_media(
        request: Request,
        url: str | None = Query(default=None),
        settings: Settings = Depends(get_settings),
    ):
        if not url or not url.strip():
            logger.warning("%s: request without url", platform)
            raise InputError("No URL provided")
        url = url.strip()

        token = require_apify_token(settings)
        task_id = settings.platform_tasks[platform]
        http = request.app.state.http

        if is_short_link(url):
            url = await resolve_redirect(http, url)

        client = ApifyClient(http, token, settings.apify_base_url)
        strategies = default_strategies(settings.poll_max_attempts, settings.poll_interval_ms)
        try:
            records = await invoke_with_alternate(client, task_id, url, strategies)
            result = extract_media_url(records)
        except EmptyResultError:
            logger.warning("%s: actor %s returned no items for %s", platform, task_id, url)
            raise
        except InvocationError as exc:
            logger.error("%s handler error (actor %s): %s %s", platform, task_id, exc, exc.details)
            raise InvocationError("Server error", details=f"{exc}: {exc.details}") from exc
        except MediaLinkError:
            raise
        except Exception as exc:
            logger.exception("%s handler error (actor %s)", platform, task_id)
            raise InvocationError("Server error", details=str(exc)) from exc

        return MediaResponse(video=result.video, raw=result.raw)

    return router
