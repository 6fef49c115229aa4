import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx

from lightspeed.config.constants import (
    FEEDBACK_THANKS_MESSAGE,
    LIGHTSPEED_ME_URL,
    LIGHTSPEED_SUGGESTION_COMPLETION_URL,
    LIGHTSPEED_SUGGESTION_CONTENT_MATCHES_URL,
    LIGHTSPEED_SUGGESTION_FEEDBACK_URL,
    LIGHTSPEED_SUGGESTION_HIDE,
    NO_SUGGESTION_MESSAGE,
    NOT_AUTHENTICATED_MESSAGE,
    UNKNOWN_ERROR,
)
from lightspeed.editor.interfaces import (
    AuthenticationProvider,
    CommandExecutor,
    ConnectionManager,
    EditorWindow,
)
from lightspeed.models.domain.error import (
    LightspeedAccessDenied,
    LightspeedApiError,
    LightspeedError,
)
from lightspeed.models.schemas import (
    CompletionRequest,
    CompletionResponse,
    ContentMatchesRequest,
    ContentMatchesResponse,
    FeedbackRequest,
    FeedbackResponse,
    LightspeedUserDetails,
    UserAction,
)
from lightspeed.utils.error_handler import UNAUTHORIZED_CODE, map_error
from lightspeed.utils.web_utils import get_base_uri

logger = logging.getLogger(__name__)

SENSITIVE_FEEDBACK_FIELDS = ("inlineSuggestion", "ansibleContent")


def _as_object(data: Any) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


@dataclass
class ApiResult:
    """
    Outcome of a single POST: either response data or a mapped error.
    """

    data: Optional[Dict[str, Any]] = None
    status_code: Optional[int] = None
    error: Optional[LightspeedError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class LightSpeedAPI:
    """
    Adapter for the Ansible Lightspeed HTTP API.
    Builds an authenticated client per call and normalizes failures.
    """

    def __init__(
        self,
        settings,
        auth_provider: AuthenticationProvider,
        connection_manager: ConnectionManager,
        window: EditorWindow,
        commands: CommandExecutor,
        extension_version: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.auth_provider = auth_provider
        self.connection_manager = connection_manager
        self.window = window
        self.commands = commands
        self.extension_version = extension_version or settings.EXTENSION_VERSION
        self.timeout = httpx.Timeout(settings.LIGHTSPEED_API_TIMEOUT)
        self._transport = transport
        self._completion_request_in_progress = False
        self._inline_suggestion_feedback_ignored_pending = False

    @property
    def completion_request_in_progress(self) -> bool:
        return self._completion_request_in_progress

    @property
    def inline_suggestion_feedback_ignored_pending(self) -> bool:
        return self._inline_suggestion_feedback_ignored_pending

    @inline_suggestion_feedback_ignored_pending.setter
    def inline_suggestion_feedback_ignored_pending(self, value: bool):
        self._inline_suggestion_feedback_ignored_pending = value

    async def _get_api_instance(self) -> httpx.AsyncClient:
        """
        Create an HTTP client carrying a freshly granted access token.
        """
        auth_token = await self.auth_provider.grant_access_token()
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {auth_token}",
        }
        return httpx.AsyncClient(
            base_url=f"{get_base_uri(self.settings)}/api",
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _post(self, url_path: str, payload: Dict[str, Any]) -> ApiResult:
        try:
            async with await self._get_api_instance() as client:
                response = await client.post(url_path, json=payload)
                response.raise_for_status()
                data = response.json() if response.content else {}
                return ApiResult(data=data, status_code=response.status_code)
        except Exception as e:
            error = map_error(e)
            logger.debug(f"POST {url_path} failed: {error.code} {error.message}")
            return ApiResult(error=error)

    async def get_data(self, url_path: str) -> Any:
        """
        Authenticated GET returning the decoded JSON body.

        Raises:
            LightspeedAccessDenied: The service answered with HTTP 401
            LightspeedApiError: Any other failure
        """
        try:
            async with await self._get_api_instance() as client:
                response = await client.get(url_path)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                raise LightspeedAccessDenied(str(e)) from e
            logger.error(f"[ansible-lightspeed-oauth] error message: {str(e)}")
            raise LightspeedApiError(str(e)) from e
        except httpx.HTTPError as e:
            logger.error(f"[ansible-lightspeed-oauth] error message: {str(e)}")
            raise LightspeedApiError(str(e)) from e
        except LightspeedApiError:
            raise
        except Exception as e:
            logger.error(f"[api] unexpected error: {str(e)}")
            raise LightspeedApiError("An unexpected error occurred") from e

    async def get_user_details(self) -> LightspeedUserDetails:
        data = await self.get_data(LIGHTSPEED_ME_URL)
        return LightspeedUserDetails.model_validate(data)

    async def completion_request(
        self, input_data: CompletionRequest
    ) -> CompletionResponse:
        """
        Request an inline suggestion.

        Never raises for transport failures; a CompletionResponse without
        predictions is returned instead.
        """
        request_data = input_data.to_payload()
        request_data["metadata"] = {
            **request_data.get("metadata", {}),
            "ansibleExtensionVersion": self.extension_version,
        }
        logger.info(
            f"[ansible-lightspeed] Completion request sent to lightspeed: "
            f"{json.dumps(request_data)}"
        )

        self._completion_request_in_progress = True
        self._inline_suggestion_feedback_ignored_pending = False
        try:
            result = await self._post(
                LIGHTSPEED_SUGGESTION_COMPLETION_URL, request_data
            )
            if not result.ok:
                self._inline_suggestion_feedback_ignored_pending = False
                await self._handle_completion_error(result.error)
                return CompletionResponse()

            data = _as_object(result.data)
            predictions = data.get("predictions")
            if not isinstance(predictions, list):
                predictions = []
            # only one inline suggestion is supported
            if result.status_code == 204 or not predictions or not predictions[0]:
                self._inline_suggestion_feedback_ignored_pending = False
                self.window.show_information_message(NO_SUGGESTION_MESSAGE)
                return CompletionResponse()

            logger.info(
                f"[ansible-lightspeed] Completion response: {json.dumps(result.data)}"
            )
            return CompletionResponse.model_validate(data)
        finally:
            if self._inline_suggestion_feedback_ignored_pending:
                self._inline_suggestion_feedback_ignored_pending = False
                self.commands.execute_command(
                    LIGHTSPEED_SUGGESTION_HIDE, UserAction.IGNORED
                )
            self._completion_request_in_progress = False

    async def _handle_completion_error(self, error: LightspeedError):
        if error.code == UNAUTHORIZED_CODE:
            if await self.connection_manager.should_reconnect():
                self.connection_manager.attempt_reconnect()
                return
            if await self.connection_manager.should_connect():
                self.connection_manager.attempt_connect()
                return
        self.window.show_error_message(error.message or UNKNOWN_ERROR)

    async def feedback_request(
        self,
        input_data: FeedbackRequest,
        org_opt_out_telemetry: bool = False,
        show_auth_error_message: bool = False,
        show_info_message: bool = False,
    ) -> FeedbackResponse:
        """
        Report user feedback.

        Args:
            input_data: The feedback events to send
            org_opt_out_telemetry: Whether the user's organization opted out
                of telemetry
            show_auth_error_message: Send even when the user is not connected
            show_info_message: Notify the user about the outcome

        Returns:
            The service response, or an empty FeedbackResponse when nothing
            was sent or the call failed
        """
        if not self.auth_provider.user_is_connected and not show_auth_error_message:
            return FeedbackResponse()

        payload = input_data.to_payload()
        payload.pop("model", None)

        if org_opt_out_telemetry and await self.auth_provider.rh_user_has_seat():
            for key in SENSITIVE_FEEDBACK_FIELDS:
                payload.pop(key, None)

        if not payload:
            return FeedbackResponse()

        if self.settings.LIGHTSPEED_MODEL:
            payload["model"] = self.settings.LIGHTSPEED_MODEL
        payload["metadata"] = {"ansibleExtensionVersion": self.extension_version}
        logger.info(
            f"[ansible-lightspeed] Feedback request sent to lightspeed: "
            f"{json.dumps(payload)}"
        )

        result = await self._post(LIGHTSPEED_SUGGESTION_FEEDBACK_URL, payload)
        if result.ok:
            if show_info_message:
                self.window.show_information_message(FEEDBACK_THANKS_MESSAGE)
            return FeedbackResponse.model_validate(_as_object(result.data))

        error_message = result.error.message or UNKNOWN_ERROR
        if show_info_message:
            self.window.show_error_message(error_message)
        else:
            logger.error(error_message)
        return FeedbackResponse()

    async def content_matches_request(
        self, input_data: ContentMatchesRequest
    ) -> Union[ContentMatchesResponse, LightspeedError]:
        """
        Ask which training sources match a suggestion.

        Transport failures are returned as a LightspeedError, not raised.
        """
        if not self.auth_provider.user_is_connected:
            self.window.show_error_message(NOT_AUTHENTICATED_MESSAGE)
            return ContentMatchesResponse()

        request_data = input_data.to_payload()
        request_data["metadata"] = {"ansibleExtensionVersion": self.extension_version}
        logger.info(
            f"[ansible-lightspeed] Content Match request sent to lightspeed: "
            f"{json.dumps(request_data)}"
        )

        result = await self._post(
            LIGHTSPEED_SUGGESTION_CONTENT_MATCHES_URL, request_data
        )
        if not result.ok:
            return result.error
        return ContentMatchesResponse.model_validate(_as_object(result.data))
