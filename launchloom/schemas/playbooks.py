from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..services.tiers import Tier


def _parse_launch_date(value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValueError("launchDate is required")
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError("launchDate must be an ISO date (YYYY-MM-DD)") from exc


class PlaybookRequest(BaseModel):
    """Body of ``POST /api/generate-pdf`` as sent by the personalization form."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="ignore")

    product_name: str = Field(..., alias="productName", min_length=1, max_length=120)
    target_audience: str = Field(..., alias="targetAudience", min_length=1, max_length=500)
    launch_date: date = Field(..., alias="launchDate")
    tier: Tier
    days_to_launch: Optional[int] = Field(None, alias="daysToLaunch")
    email: Optional[str] = None
    current_users: Optional[str] = Field(None, alias="currentUsers")

    # Pro-only fields; ignored for other tiers
    product_description: Optional[str] = Field(None, alias="productDescription")
    current_traction: Optional[str] = Field(None, alias="currentTraction")
    budget: Optional[str] = None
    selected_channels: List[str] = Field(default_factory=list, alias="selectedChannels")
    has_product_hunt_experience: Optional[bool] = Field(None, alias="hasProductHuntExperience")
    main_competitor: Optional[str] = Field(None, alias="mainCompetitor")

    @field_validator("launch_date", mode="before")
    @classmethod
    def _coerce_launch_date(cls, value: object) -> date:
        return _parse_launch_date(value)

    def days_until_launch(self, today: Optional[date] = None) -> int:
        return (self.launch_date - (today or date.today())).days

    def to_form(self, today: Optional[date] = None) -> "LaunchForm":
        """Discriminate the form variant once, at the boundary."""

        common = dict(
            product_name=self.product_name,
            target_audience=self.target_audience,
            launch_date=self.launch_date,
            days_to_launch=max(1, self.days_until_launch(today)),
            current_users=self.current_users,
        )
        if self.tier is Tier.PRO:
            return ProForm(
                **common,
                product_description=self.product_description or "",
                current_traction=self.current_traction or "",
                budget=self.budget or "",
                selected_channels=list(self.selected_channels),
                has_product_hunt_experience=bool(self.has_product_hunt_experience),
                main_competitor=self.main_competitor or "",
            )
        if self.tier is Tier.STANDARD:
            return StandardForm(**common)
        raise ValueError("the free tier is served from a static asset and has no form")


class _FormBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_name: str
    target_audience: str
    launch_date: date
    days_to_launch: int
    current_users: Optional[str] = None


class StandardForm(_FormBase):
    kind: Literal["standard"] = "standard"

    @property
    def tier(self) -> Tier:
        return Tier.STANDARD


class ProForm(_FormBase):
    kind: Literal["pro"] = "pro"
    product_description: str = ""
    current_traction: str = ""
    budget: str = ""
    selected_channels: List[str] = Field(default_factory=list)
    has_product_hunt_experience: bool = False
    main_competitor: str = ""

    @property
    def tier(self) -> Tier:
        return Tier.PRO


LaunchForm = Annotated[Union[StandardForm, ProForm], Field(discriminator="kind")]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    timestamp: str
    version: str
