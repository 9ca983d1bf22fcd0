from __future__ import annotations

import logging
from typing import Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from .client import XPayClient
from .models import WebhookEvent

logger = logging.getLogger("xpay.receiver")


def build_webhook_app(
    client: XPayClient,
    handler: Callable[[WebhookEvent], None],
    path: str = "/webhook",
) -> FastAPI:
    """Small FastAPI app that accepts gateway notifications and hands verified events to ``handler``.

    ``X-Signature`` and ``X-Timestamp`` headers, when sent, take precedence over
    the ``sign``/``timestamp`` fields of the body.
    """
    app = FastAPI(title="X-Pay webhook receiver", version="0.1.0")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post(path)
    async def receive(request: Request) -> dict:
        body = await request.body()
        event = client.parse_webhook(
            body,
            request.headers.get("X-Signature"),
            request.headers.get("X-Timestamp"),
        )
        if event is None:
            raise HTTPException(status_code=401, detail="invalid signature")
        logger.info("Accepted %s notification", event.notify_type)
        await run_in_threadpool(handler, event)
        return {"status": "ok"}

    return app
