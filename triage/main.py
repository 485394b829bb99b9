"""multipart-triage - multipart request triage trigger powered by Robyn."""

from robyn import Robyn

from triage.api.health import router as health_router
from triage.api.trigger import router as trigger_router
from triage.core.logger import LogIcon, logger
from triage.core.settings import settings as st

app = Robyn(__file__)

app.include_router(health_router)
app.include_router(trigger_router)


def main() -> None:
    logger.info(
        f"Starting {st.API_NAME}",
        icon=LogIcon.START,
        host=st.API_HOST,
        port=st.API_PORT,
        trigger=f"/api{st.TRIGGER_PATH}",
    )
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
