import logging
from typing import Any, Dict

from lightspeed.config.constants import LIGHTSPEED_THUMBS_UP_DOWN
from lightspeed.models.schemas import (
    FeedbackRequest,
    FeedbackResponse,
    PlaybookExplanationFeedbackEvent,
    ThumbsUpDownAction,
)

logger = logging.getLogger(__name__)


async def thumbs_up_down(manager, param: Dict[str, Any]) -> FeedbackResponse:
    """
    Report a thumbs up/down vote on an explanation.

    Args:
        manager: The LightSpeedManager owning the API client
        param: ``{"action": 0|1, "explanationId": str}`` as posted by the panel
    """
    action = ThumbsUpDownAction(int(param["action"]))
    logger.info(
        f"Explanation {param.get('explanationId')} voted {action.name.lower()}"
    )
    return await manager.api.feedback_request(
        FeedbackRequest(
            playbook_explanation_feedback=PlaybookExplanationFeedbackEvent(
                action=action,
                explanation_id=param["explanationId"],
            )
        ),
        org_opt_out_telemetry=manager.org_opt_out_telemetry,
        show_auth_error_message=True,
        show_info_message=True,
    )


def register_lightspeed_commands(registry, manager):
    registry.register_command(
        LIGHTSPEED_THUMBS_UP_DOWN, lambda param: thumbs_up_down(manager, param)
    )
