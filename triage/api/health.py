"""Health check endpoint reporting how the trigger is exposed."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from robyn.robyn import HttpMethod

from triage.api.trigger import TRIGGER_METHODS, TRIGGER_PREFIX
from triage.core.logger import LogIcon, logger
from triage.core.router import Router, method_name
from triage.core.settings import settings as st

router = Router()


class TriggerInfo(BaseModel):
    """Where the trigger listens and what it accepts."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    path: str
    accepted_method: str
    routed_methods: list[str]
    preview_lines: int


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str
    trigger: TriggerInfo


def trigger_info() -> TriggerInfo:
    return TriggerInfo(
        path=f"{TRIGGER_PREFIX}{st.TRIGGER_PATH}",
        accepted_method=st.ACCEPTED_METHOD.upper(),
        routed_methods=[method_name(method).upper() for method in TRIGGER_METHODS],
        preview_lines=st.PREVIEW_LINES,
    )


@router.any("/health", methods=(HttpMethod.GET,))
async def health_check() -> HealthResponse:
    logger.info("Health check requested", icon=LogIcon.HEALTHCHECK)
    return HealthResponse(status="healthy", service=st.API_NAME, version=st.API_VERSION, trigger=trigger_info())
