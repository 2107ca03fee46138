from typing import Any, Dict, List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

STORE_VERSION = 2

HealthMethod = Literal["HEAD", "GET"]
ThemeId = Literal["classic", "ocean", "carbon", "sunset"]
SortMode = Literal["urgency", "alpha_asc", "alpha_desc", "pinned_fav_urgency"]
OpenMode = Literal["new_tab", "same_tab"]

# Range and enum rules apply to request bodies only. A stored file that breaks
# them still loads, so one odd value never turns the whole store into defaults.
REQUEST_CONTEXT = {"request": True}


def _from_request(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("request"))


class CamelModel(BaseModel):
    # the JSON file and the dashboard both speak camelCase
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class AppLink(CamelModel):
    id: str
    name: str
    url: str
    git_url: Optional[str] = None
    site_url: Optional[str] = None
    doc_url: Optional[str] = None
    description: Optional[str] = None
    details_md: Optional[str] = None
    logo_url: Optional[str] = None
    cert_renewal_date: Optional[str] = None  # YYYY-MM-DD
    token_expiry_date: Optional[str] = None  # YYYY-MM-DD
    pinned: bool = False
    favorite: bool = False
    health_url: Optional[str] = None
    health_method: Optional[str] = None  # HEAD | GET
    health_ok_min: Optional[int] = None  # 100..600
    tags: List[str] = Field(default_factory=list)
    is_public: Optional[bool] = None

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: str, info: ValidationInfo) -> str:
        if _from_request(info) and not value.strip():
            raise ValueError("id must not be blank")
        return value

    @field_validator("health_method")
    @classmethod
    def _known_method(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is not None and _from_request(info) and value not in get_args(HealthMethod):
            raise ValueError(f"must be one of {', '.join(get_args(HealthMethod))}")
        return value

    @field_validator("health_ok_min")
    @classmethod
    def _ok_min_range(cls, value: Optional[int], info: ValidationInfo) -> Optional[int]:
        if value is not None and _from_request(info) and not 100 <= value <= 600:
            raise ValueError("must be between 100 and 600")
        return value


class Colors(CamelModel):
    star: Optional[str] = None
    fav_bar: Optional[str] = None
    pin: Optional[str] = None
    pin_bg: Optional[str] = None


def _default_colors() -> Colors:
    return Colors(star="#f59e0b", fav_bar="#f59e0b", pin="#0ea5e9")


_CHOICES = {"theme": ThemeId, "sort_mode": SortMode, "open_mode": OpenMode}


class SettingsRules(CamelModel):
    @field_validator("theme", "sort_mode", "open_mode", check_fields=False)
    @classmethod
    def _known_choice(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        choices = get_args(_CHOICES[info.field_name])
        if value is not None and _from_request(info) and value not in choices:
            raise ValueError(f"must be one of {', '.join(choices)}")
        return value

    @field_validator("health_interval_sec", check_fields=False)
    @classmethod
    def _positive_interval(cls, value: Optional[int], info: ValidationInfo) -> Optional[int]:
        if value is not None and _from_request(info) and value < 1:
            raise ValueError("must be at least 1")
        return value


class Settings(SettingsRules):
    site_title: str = "홈링크웹"
    site_subtitle: str = "런처 중심 · 소스위치 · 만료 카운트"
    site_logo: Optional[str] = None
    site_background_url: Optional[str] = None
    theme: str = "classic"
    sort_mode: str = "alpha_asc"
    open_mode: str = "new_tab"
    admin_mode: bool = True
    health_enabled: bool = True
    health_interval_sec: int = 30
    health_show_ms: bool = True
    colors: Colors = Field(default_factory=_default_colors)


class SettingsPatch(SettingsRules):
    """Partial settings as submitted by a client; only set keys are applied.

    ``null`` is accepted only for keys that are optional in :class:`Settings`
    (logo, background and the individual colors).
    """

    site_title: Optional[str] = None
    site_subtitle: Optional[str] = None
    site_logo: Optional[str] = None
    site_background_url: Optional[str] = None
    theme: Optional[str] = None
    sort_mode: Optional[str] = None
    open_mode: Optional[str] = None
    admin_mode: Optional[bool] = None
    health_enabled: Optional[bool] = None
    health_interval_sec: Optional[int] = None
    health_show_ms: Optional[bool] = None
    colors: Optional[Colors] = None

    @field_validator(
        "site_title",
        "site_subtitle",
        "theme",
        "sort_mode",
        "open_mode",
        "admin_mode",
        "health_enabled",
        "health_interval_sec",
        "health_show_ms",
        "colors",
    )
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        # explicit nulls only; unset keys keep the None default without validation
        if value is None:
            raise ValueError("must not be null")
        return value

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class UserData(CamelModel):
    items: List[AppLink] = Field(default_factory=list)
    # partial overlay on top of the global settings, camelCase keys
    settings: Dict[str, Any] = Field(default_factory=dict)


class StoreData(CamelModel):
    version: int = STORE_VERSION
    global_settings: Settings = Field(default_factory=Settings)
    common: UserData = Field(default_factory=UserData)
    users: Dict[str, UserData] = Field(default_factory=dict)


class DataView(CamelModel):
    settings: Settings
    items: List[AppLink]
    global_settings: Settings


class DataWrite(BaseModel):
    """Body of a write request. Absent keys leave the stored side untouched.

    Validate with ``context=REQUEST_CONTEXT`` to apply the range and enum rules.
    """

    items: Optional[List[AppLink]] = None
    settings: Optional[SettingsPatch] = None

    @field_validator("items")
    @classmethod
    def _unique_ids(cls, items: Optional[List[AppLink]]) -> Optional[List[AppLink]]:
        if items is None:
            return items
        seen = set()
        for item in items:
            if item.id in seen:
                raise ValueError(f"duplicate item id {item.id!r}")
            seen.add(item.id)
        return items


def default_store(admin_user: str = "admin") -> StoreData:
    return StoreData(users={admin_user: UserData()})


def dump(model: BaseModel) -> Dict[str, Any]:
    """JSON-ready dict with camelCase keys; unset optional fields are left out."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)
