import json
import logging
import os
import sys
import ssl
import urllib.request

import certifi

from .slab_types import Reassignment

logger = logging.getLogger(__name__)


def send_slack_alert_if_needed(
    reassignment: Reassignment,
    server: str,
) -> tuple[bool, int | None]:
    """Send a Slack message via webhook for a page move, if configured.

    Returns a tuple: (attempted, status_code). If not attempted, status_code is None.
    """
    alerts_enabled = os.environ.get(
        "MC_SLAB_MOVER_SLACK_ALERTS_ENABLED", "false"
    ).lower() in {"1", "true", "yes"}
    webhook_url = os.environ.get("MC_SLAB_MOVER_SLACK_WEBHOOK_URL")

    should_alert = alerts_enabled and bool(webhook_url)
    logger.debug(
        f"Slack alerts enabled={alerts_enabled} "
        f"has_webhook={'yes' if webhook_url else 'no'}"
    )

    if not should_alert:
        return False, None

    verify_ssl = (
        os.environ.get("MC_SLAB_MOVER_SLACK_VERIFY_SSL", "true").lower() == "true"
    )
    ssl_ctx: ssl.SSLContext
    if verify_ssl:
        ssl_ctx = ssl.create_default_context(cafile=certifi.where())
    else:
        ssl_ctx = ssl._create_unverified_context()
        print(
            "[mc-slab-mover][Slack] SSL verify=OFF (unverified)",
            file=sys.stderr,
            flush=True,
        )

    payload = {
        "text": (
            f"Slab page moved on {server}: "
            f"{reassignment.source} -> {reassignment.destination}"
        ),
        "attachments": [
            {
                "color": "warning",
                "fields": [
                    {"title": "Server", "value": server, "short": True},
                    {
                        "title": "Source slab",
                        "value": str(reassignment.source),
                        "short": True,
                    },
                    {
                        "title": "Destination slab",
                        "value": str(reassignment.destination),
                        "short": True,
                    },
                    {
                        "title": "Response",
                        "value": reassignment.response or "n/a",
                        "short": True,
                    },
                ],
            }
        ],
    }

    try:
        req = urllib.request.Request(
            webhook_url or "",
            data=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        with urllib.request.urlopen(req, timeout=5, context=ssl_ctx) as resp:
            code = getattr(resp, "status", None) or getattr(resp, "code", None)
            print(
                f"[mc-slab-mover][Slack] sent, status={code}",
                file=sys.stderr,
                flush=True,
            )
            try:
                return True, int(code) if code is not None else None
            except Exception:
                return True, None
    except Exception as slack_err:  # pragma: no cover
        print(
            f"[mc-slab-mover][Slack] send failed: {slack_err}",
            file=sys.stderr,
            flush=True,
        )
        return True, None
