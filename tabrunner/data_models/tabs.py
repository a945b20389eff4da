"""
tabrunner/data_models/tabs.py

Data models for tab commands.

Contains:
- Tab: Handle of a tab owned by the tab manager
- ExecutionMetadata: Frozen timestamps/counters attached to a content script run
- ExecutionOutcome: Resolve/reject result of a completed content script
- CreateTabRequest, NavigateTabRequest, RunScriptRequest, WaitForNewPageRequest: Per-command parameters
- parse_request: Validate raw command parameters into a request record
"""

import math
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from tabrunner.config import Config
from tabrunner.utils.exceptions import IllegalArgumentError

if TYPE_CHECKING:
    from tabrunner.tabs.abstract_tab_manager import AbstractTabManager


ALLOWED_URL_PATTERN = re.compile(r"^https?://")

RequestT = TypeVar("RequestT", bound="TabRequest")


def js_truthy(value: Any) -> bool:
    """
    Truthiness of a value received from a content script, as JavaScript sees it.

    Falsy: None, False, 0, 0.0, NaN and "". Empty lists and dicts are truthy.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


class Tab(BaseModel):
    """A browser tab tracked by the tab manager."""
    id: str = Field(description="Opaque tab identifier")


class ExecutionMetadata(BaseModel):
    """
    Diagnostic timestamps and counters passed along with a content script run.

    Timestamps are milliseconds since the epoch. `wait_begin_time` and
    `attempt_number` are only set for runs started by `tabs.wait`.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    run_begin_time: int = Field(alias="runBeginTime")
    wait_begin_time: int | None = Field(default=None, alias="waitBeginTime")
    attempt_number: int | None = Field(default=None, alias="attemptNumber", ge=0)

    def to_payload(self) -> dict[str, Any]:
        """Camel-cased form handed to the content script; unset fields are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ExecutionOutcome(BaseModel):
    """
    Result of a content script that ran to completion.

    Exactly one of `resolve` or `reject` is populated. Either may hold None,
    so the populated variant is tracked through the set of explicitly given fields.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    resolve: Any = None
    reject: Any = None

    @model_validator(mode="after")
    def validate_exactly_one_variant(self) -> "ExecutionOutcome":
        populated = {"resolve", "reject"} & self.model_fields_set
        if len(populated) != 1:
            raise ValueError("an execution outcome must populate exactly one of `resolve` or `reject`")
        return self

    @classmethod
    def resolved(cls, value: Any) -> "ExecutionOutcome":
        return cls(resolve=value)

    @classmethod
    def rejected(cls, value: Any) -> "ExecutionOutcome":
        return cls(reject=value)

    @classmethod
    def from_script_result(cls, result: "ExecutionOutcome | Mapping[str, Any]") -> "ExecutionOutcome":
        """
        Build an outcome from what a tab manager returned.

        Mappings are read leniently: a `reject` that is present and not None
        wins, otherwise the result counts as resolved (with None if `resolve`
        is absent too). Extra keys are ignored.
        """
        if isinstance(result, ExecutionOutcome):
            return result
        if isinstance(result, Mapping):
            if result.get("reject") is not None:
                return cls.rejected(result["reject"])
            if "resolve" not in result and "reject" in result:
                return cls.rejected(None)
            return cls.resolved(result.get("resolve"))
        return cls.model_validate(result)

    @property
    def is_rejected(self) -> bool:
        """Whether the script signalled a rejection value that is truthy by JavaScript rules."""
        return "reject" in self.model_fields_set and js_truthy(self.reject)

    def to_payload(self) -> dict[str, Any]:
        """Wire form: `{"resolve": value}` or `{"reject": value}`."""
        return self.model_dump(exclude_unset=True)


# Request records _________________________________________________________________________________

class TabRequest(BaseModel):
    """
    Base class for command parameters.

    Unknown keys are dropped, and strict mode keeps numbers from being coerced into strings.
    """
    model_config = ConfigDict(extra="ignore", frozen=True, strict=True, populate_by_name=True)

    # argument name -> message used instead of "invalid argument `name`"
    ARGUMENT_MESSAGES: ClassVar[dict[str, str]] = {}


class CreateTabRequest(TabRequest):
    """`tabs.create` takes no parameters; new tabs always start blank."""


class TabReferenceRequest(TabRequest):
    """Parameters addressing an existing, live tab."""
    id: str

    @field_validator("id")
    @classmethod
    def validate_tab_is_tracked(cls, value: str, info: ValidationInfo) -> str:
        tab_manager = (info.context or {}).get("tab_manager")
        if tab_manager is not None and not tab_manager.has_tab(value):
            raise ValueError(f"no live tab with id {value!r}")
        return value


class NavigateTabRequest(TabReferenceRequest):
    """Parameters of `tabs.navigate`."""
    ARGUMENT_MESSAGES: ClassVar[dict[str, str]] = {
        "url": "`url` argument must be an absolute HTTP URL",
    }

    url: str

    @field_validator("url")
    @classmethod
    def validate_absolute_http_url(cls, value: str) -> str:
        if not ALLOWED_URL_PATTERN.match(value):
            raise ValueError("url must start with http:// or https://")
        return value


class RunScriptRequest(TabReferenceRequest):
    """Parameters of `tabs.run` and `tabs.wait`."""
    code: str
    arg: Any = None


class WaitForNewPageRequest(RunScriptRequest):
    """Parameters of `tabs.waitForNewPage`."""
    timeout_ms: float = Field(
        default_factory=lambda: Config.NEW_PAGE_TIMEOUT_MS,
        alias="timeoutMs",
        ge=0,
        description="Budget for the new page, counted from the end of the script run",
    )


def parse_request(
    model: type[RequestT],
    command: str,
    params: Mapping[str, Any] | None,
    tab_manager: "AbstractTabManager | None" = None,
) -> RequestT:
    """
    Validate raw command parameters into a request record.

    Fields are validated in declaration order, so an invalid `id` is reported
    before anything else and the tab manager is only asked about string ids.

    Args:
        model: Request record class to build.
        command: Command name used in error messages, e.g. "tabs.run".
        params: Raw parameters supplied by the caller.
        tab_manager: Consulted to confirm that the addressed tab is live.

    Returns:
        The validated request record.

    Raises:
        IllegalArgumentError: If any parameter is missing or invalid.
    """
    if params is None:
        params = {}
    if not isinstance(params, Mapping):
        raise IllegalArgumentError(f"{command}(): invalid arguments")

    try:
        return model.model_validate(dict(params), context={"tab_manager": tab_manager})
    except ValidationError as e:
        errors = e.errors()
        loc = errors[0]["loc"] if errors else ()
        if not loc:
            raise IllegalArgumentError(f"{command}(): invalid arguments") from e
        argument = str(loc[0])
        message = model.ARGUMENT_MESSAGES.get(argument, f"invalid argument `{argument}`")
        raise IllegalArgumentError(f"{command}(): {message}") from e
