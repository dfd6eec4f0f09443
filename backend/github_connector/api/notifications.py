"""Webhook endpoint for Graph connector notifications."""

import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response

from github_connector.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])


def get_dispatcher(request: Request) -> NotificationDispatcher:
    """Dispatcher created at startup."""
    return request.app.state.dispatcher


async def dispatch_notifications(dispatcher: NotificationDispatcher, payload: Any) -> None:
    """Run a dispatch after the response has been sent."""
    try:
        outcomes = await dispatcher.dispatch(payload)
        if outcomes:
            logger.info(f"Processed {len(outcomes)} notification(s): {[o.value for o in outcomes]}")
    except Exception as e:
        logger.exception(f"Error processing notifications: {e}")


@router.post("/", status_code=202)
async def receive_notifications(
    request: Request,
    background_tasks: BackgroundTasks,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> Response:
    """Accept a notification batch.

    Always answers 202 so Graph does not retry; the batch is processed in the
    background whatever it contains.
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.info("Received notification request with a non-JSON body")
        payload = None

    background_tasks.add_task(dispatch_notifications, dispatcher, payload)
    return Response(status_code=202)
