import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
from urllib.parse import quote, urlencode

import requests
from pydantic import ValidationError

from polli_errors import HttpError, ResponseParseError, TransportError
from polli_models import GenerationRequest, ModelDescriptor
from polli_settings import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

BOOLEAN_FLAGS = ("nologo", "private", "nofeed", "enhance", "safe")


def _headers(api_key: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"}


def query_params(req: GenerationRequest) -> Dict[str, str]:
    """Only set values are sent; false flags are left out rather than sent as 'false'."""
    params: Dict[str, str] = {}
    if req.model:
        params["model"] = req.model
    if req.width:
        params["width"] = str(req.width)
    if req.height:
        params["height"] = str(req.height)
    if req.seed and req.seed != "0":
        params["seed"] = str(req.seed)
    for flag in BOOLEAN_FLAGS:
        if getattr(req, flag):
            params[flag] = "true"
    return params


def build_image_url(prompt: str, params: Dict[str, str], base_url: str = DEFAULT_BASE_URL) -> str:
    url = f"{base_url}/{quote(prompt, safe='')}"
    if params:
        url += "?" + urlencode(params)
    return url


def _get(url: str, api_key: str, timeout: Optional[float]) -> requests.Response:
    logger.debug("GET %s", url)
    try:
        return requests.get(
            url,
            headers=_headers(api_key),
            timeout=timeout,
            allow_redirects=True,
            verify=True,
        )
    except requests.RequestException as e:
        logger.warning("Request to %s failed: %s", url, e)
        raise TransportError(str(e)) from e


def _http_error_message(resp: requests.Response) -> str:
    message = f"HTTP {resp.status_code} error"
    try:
        body = resp.json()
    except ValueError:
        return message
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        message += f": {error['message']}"
    return message


def fetch_image(url: str, api_key: str, timeout: Optional[float] = DEFAULT_TIMEOUT) -> Tuple[bytes, str]:
    """Return the raw body and its declared content type."""
    resp = _get(url, api_key, timeout)
    if resp.status_code != 200:
        message = _http_error_message(resp)
        logger.warning("Image request rejected: %s", message)
        raise HttpError(message, status_code=resp.status_code)
    return resp.content, resp.headers.get("Content-Type", "")


def fetch_models(
    api_key: str,
    base_url: str = DEFAULT_BASE_URL,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> List[Any]:
    resp = _get(f"{base_url}/models", api_key, timeout)
    if resp.status_code != 200:
        raise HttpError(f"Failed to fetch models (HTTP {resp.status_code})", status_code=resp.status_code)
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if not payload or not isinstance(payload, list):
        raise ResponseParseError("Failed to parse models response")
    return payload


def iter_models(payload: Iterable[Any]) -> Iterator[ModelDescriptor]:
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        try:
            yield ModelDescriptor.model_validate(entry)
        except ValidationError as e:
            logger.warning("Skipping malformed model entry %r: %s", entry.get("name"), e)
