"""Alt Text Studio API: image analysis, image generation, and the built frontend."""

import logging
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, FastAPI, File, Request, Response, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from alttext.ai.facade import AltTextService, GenerationUnavailableError
from alttext.ai.gateway import GatewayError
from alttext.core.config import get_config
from alttext.core.errors import UploadRejectedError
from alttext.core.uploads import validate_image_upload, validate_prompt

_log = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _get_service() -> AltTextService:
    return AltTextService(get_config())


app = FastAPI(title="Alt Text Studio")

templates_dir = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))

# Built client bundle (npm run build in the frontend project). Mounted before the catch-all route.
_assets_dir = Path(get_config().frontend_dir).resolve() / "assets"
if _assets_dir.is_dir():
    app.mount("/assets", StaticFiles(directory=str(_assets_dir)), name="assets")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_config().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class GenerateIn(BaseModel):
    prompt: str | None = None


@app.exception_handler(StarletteHTTPException)
def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse({"error": message}, status_code=400)


@app.exception_handler(UploadRejectedError)
def _upload_rejected(request: Request, exc: UploadRejectedError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.get("/api/test")
def api_test() -> dict[str, str]:
    return {"message": "Backend API is working!"}


@app.get("/api/status")
def api_status(service: AltTextService = Depends(_get_service)) -> dict[str, str]:
    """Reachability of the inference host, for the client's status indicator."""
    return service.check_status()


@app.post("/api/analyze-image")
def api_analyze_image(
    image: UploadFile | None = File(default=None),
    service: AltTextService = Depends(_get_service),
) -> JSONResponse:
    """Return {altText, caption} for the uploaded image (live or mock)."""
    if image is None:
        raise UploadRejectedError("No image file provided")
    # Read one byte past the limit so oversize is detectable without buffering the whole upload.
    content = image.file.read(service.settings.max_upload_bytes + 1)
    validate_image_upload(image.filename, content, service.settings)
    _log.info("Analyzing %s (%d bytes)", image.filename, len(content))
    result = service.analyze(content)
    return JSONResponse(result.to_response())


@app.post("/api/generate-image")
def api_generate_image(
    payload: GenerateIn,
    service: AltTextService = Depends(_get_service),
) -> Response:
    """Return PNG bytes for the prompt. Provider failures are not replaced by a mock image."""
    prompt = validate_prompt(payload.prompt)
    try:
        image = service.generate(prompt)
    except GenerationUnavailableError as e:
        _log.warning("Image generation unavailable: %s", e)
        return JSONResponse({"error": str(e)}, status_code=503)
    except GatewayError as e:
        _log.error("Image generation failed: %s", e)
        return JSONResponse({"error": "Failed to generate image"}, status_code=502)
    return Response(content=image, media_type="image/png")


@app.get("/{full_path:path}", response_class=HTMLResponse, include_in_schema=False)
def frontend(request: Request, full_path: str) -> Response:
    """Serve the built frontend's index.html for every client route, or a help page if not built."""
    if full_path.startswith("api"):
        raise StarletteHTTPException(status_code=404, detail="Not Found")
    cfg = get_config()
    frontend_dir = Path(cfg.frontend_dir).resolve()
    index = frontend_dir / "index.html"
    if index.is_file():
        return FileResponse(index)
    return templates.TemplateResponse(
        request,
        "not_built.html",
        {"port": cfg.port, "frontend_dir": str(frontend_dir)},
    )
