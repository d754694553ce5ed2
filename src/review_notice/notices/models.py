"""
Notice data models: notice configuration, actions, and decisions.
"""

import html
from datetime import timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from .keys import ACTION_FIELD, default_prefix, option_key

# Classes every notice carries (WordPress admin "info" notice styles)
BASE_CLASSES = ["notice", "notice-info"]

REVIEW_URL_TEMPLATE = "https://wordpress.org/support/plugin/{slug}/reviews/#new-post"

DEFAULT_MESSAGE = (
    "Hey {viewer}, I noticed you've been using {name} for more than {days} days "
    "– that's awesome! Could you please do me a BIG favor and give it a "
    "5-star rating on WordPress? Just to help us spread the word and boost our "
    "motivation."
)

SECONDS_PER_DAY = 24 * 60 * 60


class NoticeAction(str, Enum):
    """Responses a viewer can send back for a notice."""

    LATER = "later"
    DISMISS = "dismiss"


class HiddenReason(str, Enum):
    """First check that kept a notice hidden."""

    INACTIVE = "inactive"
    OUT_OF_SCOPE = "out_of_scope"
    UNAUTHORIZED = "unauthorized"
    NOT_YET = "not_yet"
    DISMISSED = "dismissed"
    STORAGE_ERROR = "storage_error"


class ActionLabels(BaseModel):
    """
    Link texts for the notice actions.

    An empty label hides that action link.
    """

    review: str = "Ok, you deserve it"
    later: str = "Nope, maybe later"
    dismiss: str = "I already did"


class Notice(BaseModel):
    """
    A review notice registered for one plugin.

    A notice with an empty slug or name, or one explicitly disabled, is
    inert: it is never shown and ignores every action.
    """

    slug: str
    name: str
    prefix: str = ""
    days: int = Field(default=7, ge=0)
    screens: List[str] = Field(default_factory=list)
    cap: str = "manage_options"
    classes: List[str] = Field(default_factory=list)
    message: str = ""
    action_labels: ActionLabels = Field(default_factory=ActionLabels)
    domain: str = "review-notice"
    enabled: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "slug": "demo-plugin",
                "name": "Demo Plugin",
                "days": 7,
                "screens": ["plugins"],
                "cap": "manage_options",
                "classes": ["is-dismissible"],
                "action_labels": {"dismiss": "Already reviewed"},
            }
        }

    @model_validator(mode="after")
    def _fill_prefix(self) -> "Notice":
        if not self.prefix:
            self.prefix = default_prefix(self.slug)
        return self

    @property
    def is_active(self) -> bool:
        return self.enabled and bool(self.slug) and bool(self.name)

    @property
    def snooze_interval(self) -> timedelta:
        return timedelta(days=self.days)

    @property
    def snooze_seconds(self) -> int:
        return self.days * SECONDS_PER_DAY

    @property
    def review_url(self) -> str:
        return REVIEW_URL_TEMPLATE.format(slug=self.slug)

    @property
    def action_param(self) -> str:
        """Request parameter name that carries this notice's action value."""
        return option_key(self.prefix, ACTION_FIELD)

    def key(self, field: str) -> str:
        return option_key(self.prefix, field)

    def css_classes(self) -> str:
        """Base notice classes plus extra classes, without duplicates."""
        classes: List[str] = []
        for cls in BASE_CLASSES + self.classes:
            if cls and cls not in classes:
                classes.append(cls)
        return " ".join(classes)

    def available_actions(self) -> List[str]:
        """Action names whose label is non-empty, in display order."""
        labels = self.action_labels
        return [
            action
            for action in ("review", "later", "dismiss")
            if getattr(labels, action)
        ]

    def render_message(self, viewer_name: Optional[str] = None) -> str:
        """
        Get the notice message for a viewer.

        A configured message is returned as-is and is expected to be safe
        markup already. The default message greets the viewer by name.

        Args:
            viewer_name: Display name of the viewer, if known

        Returns:
            Message markup
        """
        if self.message:
            return self.message

        viewer = viewer_name.title() if viewer_name else "friend"
        return DEFAULT_MESSAGE.format(
            viewer=html.escape(viewer),
            name=f"<strong>{html.escape(self.name)}</strong>",
            days=self.days,
        )


class NoticeDecision(BaseModel):
    """Outcome of evaluating a notice for one viewer."""

    slug: str
    viewer_id: str
    visible: bool
    reason: Optional[HiddenReason] = None


class ActionLink(BaseModel):
    """One rendered action link."""

    action: str
    label: str
    url: Optional[str] = None


class NoticeView(BaseModel):
    """Display data for a notice as seen by one viewer."""

    slug: str
    name: str
    visible: bool
    reason: Optional[HiddenReason] = None
    message: Optional[str] = None
    classes: Optional[str] = None
    action_param: Optional[str] = None
    actions: List[ActionLink] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        notice: Notice,
        decision: NoticeDecision,
        viewer_name: Optional[str] = None,
    ) -> "NoticeView":
        """
        Build the view for a decision.

        Hidden notices carry only their identity and the hidden reason.
        """
        if not decision.visible:
            return cls(
                slug=notice.slug,
                name=notice.name,
                visible=False,
                reason=decision.reason,
            )

        labels = notice.action_labels
        actions = [
            ActionLink(
                action=action,
                label=getattr(labels, action),
                url=notice.review_url if action == "review" else None,
            )
            for action in notice.available_actions()
        ]
        return cls(
            slug=notice.slug,
            name=notice.name,
            visible=True,
            message=notice.render_message(viewer_name),
            classes=notice.css_classes(),
            action_param=notice.action_param,
            actions=actions,
        )
