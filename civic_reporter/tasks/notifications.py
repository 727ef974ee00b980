"""Non-blocking background tasks for notifications and outbound communications."""

import logging
import os

import httpx

from civic_reporter.database import models

logger = logging.getLogger(__name__)


def build_issue_payload(issue: models.Issue) -> dict:
    """Slack Block Kit message announcing a newly reported issue."""
    return {
        "blocks": [
            {
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": f"🆕 New Issue Reported: {issue.code}",
                },
            },
            {
                "type": "section",
                "fields": [
                    {
                        "type": "mrkdwn",
                        "text": f"*Title:*\n{issue.title}",
                    },
                    {
                        "type": "mrkdwn",
                        "text": f"*Department:*\n{issue.department}",
                    },
                    {
                        "type": "mrkdwn",
                        "text": f"*Category:*\n{issue.issue_type}",
                    },
                    {
                        "type": "mrkdwn",
                        "text": f"*Location:*\n{issue.address or f'{issue.latitude}, {issue.longitude}'}",
                    },
                ],
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"*Description:*\n{issue.description or '_No description provided_'}",
                },
            },
        ]
    }


def notify_issue_creation(issue: models.Issue) -> None:
    """Send a Slack notification when a citizen reports a new issue.

    This is a FastAPI BackgroundTask, run after the response is sent.

    Args:
        issue: The Issue model instance to notify about
    """
    slack_webhook_url = os.environ.get("SLACK_WEBHOOK_URL")
    if not slack_webhook_url:
        logger.warning("SLACK_WEBHOOK_URL not set, skipping notification")
        return

    try:
        with httpx.Client(timeout=5.0) as client:
            response = client.post(slack_webhook_url, json=build_issue_payload(issue))
            response.raise_for_status()

        logger.info(
            "Slack notification sent successfully",
            extra={"issue_id": issue.id},
        )

    except httpx.HTTPError:
        logger.exception(
            "Failed to send Slack notification",
            extra={"issue_id": issue.id},
        )
