import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from polli_errors import ConfigError, PollinationsError, SaveError
from polli_models import ASPECT_ALIASES, ASPECT_SIZES, GenerationRequest, GenerationResult, ModelDescriptor
from pollinations_client import build_image_url, fetch_image, fetch_models, iter_models, query_params
from polli_settings import Settings

logger = logging.getLogger(__name__)

RESOLUTION_RE = re.compile(r"(\d+)x(\d+)", re.IGNORECASE)
CONTENT_TYPE_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png"}


def resolve_dimensions(req: GenerationRequest) -> GenerationRequest:
    """Apply the aspect preset, then let an explicit WxH resolution override it."""
    width, height = req.width, req.height
    if req.aspect:
        width, height = ASPECT_SIZES[ASPECT_ALIASES.get(req.aspect, req.aspect)]
    if req.resolution:
        match = RESOLUTION_RE.fullmatch(req.resolution)
        if match:
            width, height = int(match.group(1)), int(match.group(2))
        else:
            logger.debug("Ignoring malformed resolution %r", req.resolution)
    return req.model_copy(update={"width": width, "height": height})


def extension_for(content_type: Optional[str], fallback: str) -> str:
    for mime, ext in CONTENT_TYPE_EXTENSIONS.items():
        if content_type and mime in content_type:
            return ext
    return fallback


def resolve_output_path(output: Optional[str], extension: str, now: Optional[datetime] = None) -> str:
    """Return where the image goes.

    No output means a timestamped file in the working directory; an existing
    directory gets the same timestamped name inside it.
    """
    filename = f"img_{(now or datetime.now()).strftime('%Y%m%d_%H%M%S')}.{extension}"
    if not output:
        return f"./{filename}"
    if os.path.isdir(output):
        return f"{output.rstrip('/')}/{filename}"
    return output


def save_image(path: str, data: bytes) -> None:
    target = Path(path)
    try:
        # mkdir(parents=True) only applies the mode to the last level
        for directory in reversed(target.parents):
            if not directory.is_dir():
                directory.mkdir(mode=0o755, exist_ok=True)
        target.write_bytes(data)
    except OSError as e:
        logger.error("Could not write %s: %s", path, e)
        raise SaveError(f"Failed to save image to: {path}") from e


def _generate(req: GenerationRequest, settings: Settings) -> GenerationResult:
    api_key = req.api_key or settings.api_key
    if not api_key:
        raise ConfigError("API key not found. Please set POLLINATIONS_API_KEY in .env file or pass it as an option.")
    if not req.prompt:
        raise ConfigError("Prompt is required. Use -c or --content option.")

    req = resolve_dimensions(req)
    logger.debug("Resolved size %sx%s for model %s", req.width, req.height, req.model)

    url = build_image_url(req.prompt, query_params(req), settings.base_url)
    data, content_type = fetch_image(url, api_key, settings.timeout)

    path = resolve_output_path(req.output, extension_for(content_type, req.format))
    save_image(path, data)
    logger.info("Saved %d bytes to %s", len(data), path)
    return GenerationResult.ok(path, data, content_type)


def generate(req: GenerationRequest, settings: Optional[Settings] = None) -> GenerationResult:
    """Run one generation and report the outcome as a result instead of raising."""
    try:
        return _generate(req, settings or Settings())
    except PollinationsError as e:
        return GenerationResult.failed(e)


def render_model(model: ModelDescriptor) -> str:
    lines = [f"Model: {model.name}"]
    if model.description:
        lines.append(f"  Description: {model.description}")
    if model.aliases:
        lines.append(f"  Aliases: {', '.join(model.aliases)}")
    if model.pricing:
        parts = [f"{key}: {value}" for key, value in model.pricing.items() if key != "currency"]
        if "currency" in model.pricing:
            parts.append(str(model.pricing["currency"]))
        lines.append(f"  Pricing: {' '.join(parts)}")
    return "\n".join(lines) + "\n"


def list_models(
    api_key: Optional[str] = None,
    settings: Optional[Settings] = None,
    out: Callable[[str], None] = print,
) -> None:
    settings = settings or Settings()
    api_key = api_key or settings.api_key
    if not api_key:
        out("Error: API key not found.")
        return

    try:
        payload = fetch_models(api_key, settings.base_url, settings.timeout)
    except PollinationsError as e:
        out(f"Error: {e.message}")
        return

    out("\n=== Available Image Models ===\n")
    for model in iter_models(payload):
        out(render_model(model))
