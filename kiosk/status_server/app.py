"""FastAPI app for the kiosk display: GET /api/pins, GET /health, POST /webhook/update, static kiosk page.

Readings are re-read from disk on every /api/pins request; nothing is cached between requests."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from fastapi import FastAPI
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from kiosk.config.settings import get_readings_config, get_server_config
from kiosk.readings import PinReader, build_reader

logger = logging.getLogger(__name__)

_PLACEHOLDER_HTML = (
    "<!DOCTYPE html><html><body><p>Kiosk page not found.</p>"
    "<a href='/api/pins'>/api/pins</a></body></html>"
)


def iso_now() -> str:
    """Current UTC time as ISO-8601 with milliseconds and Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_app(
    reader: PinReader,
    static_dir: Optional[Union[str, Path]] = None,
    webhook_enabled: bool = False,
) -> FastAPI:
    """Build FastAPI app around one PinReader. Static files under static_dir are mounted after the API routes."""
    app = FastAPI(title="Pin Kiosk Server", description="Sensor pin readings for the kiosk display")
    static_path = Path(static_dir) if static_dir is not None else None

    @app.get("/", response_class=HTMLResponse)
    def get_index():
        """Serve the kiosk page (index.html from static_dir)."""
        if static_path is not None:
            index = static_path / "index.html"
            if index.is_file():
                return FileResponse(index, media_type="text/html")
        return HTMLResponse(_PLACEHOLDER_HTML)

    @app.get("/api/pins")
    def get_pins() -> JSONResponse:
        """Return {"pins": [...]} sorted by pin. Missing data gives an empty list, not an error."""
        try:
            pins = [r.to_dict() for r in reader.read_pins()]
            return JSONResponse(status_code=200, content={"pins": pins})
        except Exception:
            logger.exception("Error in /api/pins")
            return JSONResponse(status_code=500, content={"error": "Failed to read pin data"})

    @app.get("/health")
    def get_health() -> Dict[str, Any]:
        return {"status": "ok", "timestamp": iso_now()}

    if webhook_enabled:

        @app.post("/webhook/update")
        def post_webhook_update() -> Dict[str, Any]:
            """Acknowledge a notification from the sensor script. The body is ignored and nothing is refreshed."""
            return {"status": "ok", "message": "Webhook received", "timestamp": iso_now()}

    if static_path is not None and static_path.is_dir():
        app.mount("/", StaticFiles(directory=str(static_path)), name="static")
    elif static_path is not None:
        logger.warning("static dir %s not found; serving API only", static_path)

    return app


def run_server(config: dict) -> None:
    """Start the kiosk server on host:port from config (PORT env overrides). Bind failure is fatal."""
    import uvicorn

    server_cfg = get_server_config(config)
    readings_cfg = get_readings_config(config)
    reader = build_reader(readings_cfg)
    app = create_app(reader, server_cfg["static_dir"], server_cfg["webhook_enabled"])

    host, port = server_cfg["host"], server_cfg["port"]
    logger.info("Kiosk server running on http://%s:%s", host, port)
    logger.info("Accessible at http://localhost:%s", port)
    logger.info("Pin readings source: %s", reader.describe())
    uvicorn.run(app, host=host, port=port, log_level="info")


def main() -> None:
    """Console entry: kiosk-server [config.yaml]."""
    import sys

    from kiosk.config.settings import read_config

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        level=logging.INFO,
    )
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    config, config_path = read_config(args[0] if args else None)
    logger.info("Config: %s", config_path)
    run_server(config)
