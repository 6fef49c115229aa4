from enum import IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserAction(IntEnum):
    ACCEPTED = 0
    REJECTED = 1
    IGNORED = 2


class ThumbsUpDownAction(IntEnum):
    UP = 0
    DOWN = 1


class LightspeedModel(BaseModel):
    """
    Base model for payloads exchanged with the Lightspeed service.

    Attributes are snake_case; the wire format uses the camelCase aliases.
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---------------------------------------------------------------------------
# Completions
# ---------------------------------------------------------------------------


class CompletionMetadata(LightspeedModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    document_uri: Optional[str] = Field(None, alias="documentUri")
    activity_id: Optional[str] = Field(None, alias="activityId")
    ansible_file_type: Optional[str] = Field(None, alias="ansibleFileType")
    additional_context: Optional[Dict[str, Any]] = Field(
        None, alias="additionalContext"
    )
    ansible_extension_version: Optional[str] = Field(
        None, alias="ansibleExtensionVersion"
    )


class CompletionRequest(LightspeedModel):
    """
    Represents a request for an inline suggestion.
    """

    prompt: str = Field(..., description="Editor content preceding the cursor")
    suggestion_id: Optional[str] = Field(None, alias="suggestionId")
    metadata: Optional[CompletionMetadata] = None
    model: Optional[str] = None


class CompletionResponse(LightspeedModel):
    """
    Represents the suggestions returned by the service.

    An instance with no predictions is the "no suggestion" result.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    predictions: List[str] = Field(default_factory=list)
    model: Optional[str] = None
    suggestion_id: Optional[str] = Field(None, alias="suggestionId")


# ---------------------------------------------------------------------------
# Feedback
# ---------------------------------------------------------------------------


class InlineSuggestionEvent(LightspeedModel):
    latency: Optional[float] = None
    user_action_time: Optional[float] = Field(None, alias="userActionTime")
    action: Optional[UserAction] = None
    suggestion_id: Optional[str] = Field(None, alias="suggestionId")
    activity_id: Optional[str] = Field(None, alias="activityId")


class AnsibleContentEvent(LightspeedModel):
    content: str
    document_uri: str = Field(..., alias="documentUri")
    trigger: str
    activity_id: Optional[str] = Field(None, alias="activityId")


class SentimentFeedback(LightspeedModel):
    value: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    feedback: str


class SuggestionQualityFeedback(LightspeedModel):
    prompt: str
    provided_suggestion: str = Field(..., alias="providedSuggestion")
    expected_suggestion: str = Field(..., alias="expectedSuggestion")
    additional_comment: Optional[str] = Field(None, alias="additionalComment")


class IssueFeedback(LightspeedModel):
    type: str = Field(..., description="'bug-report' or 'feature-request'")
    title: str
    description: str


class PlaybookExplanationEvent(LightspeedModel):
    explanation_id: str = Field(..., alias="explanationId")


class PlaybookExplanationFeedbackEvent(LightspeedModel):
    action: ThumbsUpDownAction
    explanation_id: str = Field(..., alias="explanationId")


class FeedbackRequest(LightspeedModel):
    """
    Represents a user reaction to a suggestion or an explanation.

    Every field is optional; only the populated ones are sent.
    """

    inline_suggestion: Optional[InlineSuggestionEvent] = Field(
        None, alias="inlineSuggestion"
    )
    ansible_content: Optional[AnsibleContentEvent] = Field(
        None, alias="ansibleContent"
    )
    sentiment_feedback: Optional[SentimentFeedback] = Field(
        None, alias="sentimentFeedback"
    )
    suggestion_quality_feedback: Optional[SuggestionQualityFeedback] = Field(
        None, alias="suggestionQualityFeedback"
    )
    issue_feedback: Optional[IssueFeedback] = Field(None, alias="issueFeedback")
    playbook_explanation: Optional[PlaybookExplanationEvent] = Field(
        None, alias="playbookExplanation"
    )
    playbook_explanation_feedback: Optional[PlaybookExplanationFeedbackEvent] = (
        Field(None, alias="playbookExplanationFeedback")
    )
    model: Optional[str] = None


class FeedbackResponse(LightspeedModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    message: Optional[str] = None


# ---------------------------------------------------------------------------
# Content matches
# ---------------------------------------------------------------------------


class ContentMatchesRequest(LightspeedModel):
    suggestions: List[str]
    suggestion_id: str = Field(..., alias="suggestionId")
    model: Optional[str] = None


class ContentMatch(BaseModel):
    repo_name: Optional[str] = None
    repo_url: Optional[str] = None
    path: Optional[str] = None
    license: Optional[str] = None
    data_source_description: Optional[str] = None
    score: Optional[float] = None


class ContentMatchDetail(BaseModel):
    contentmatch: List[ContentMatch] = Field(default_factory=list)


class ContentMatchesResponse(LightspeedModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    contentmatches: List[ContentMatchDetail] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Explanation and user details
# ---------------------------------------------------------------------------


class ExplanationResponse(LightspeedModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content: str = ""
    format: Optional[str] = None
    explanation_id: Optional[str] = Field(None, alias="explanationId")


class LightspeedUserDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    username: Optional[str] = None
    external_username: Optional[str] = None
    rh_user_has_seat: bool = False
    rh_org_has_subscription: bool = False
    rh_user_is_org_admin: bool = False
