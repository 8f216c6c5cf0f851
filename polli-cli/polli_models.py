from typing import Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from polli_errors import PollinationsError

AspectName = Literal["portrait", "landscape", "square", "P", "L", "S"]
ErrorKind = Literal["config", "transport", "http", "io"]

ASPECT_SIZES: Dict[str, Tuple[int, int]] = {
    "portrait": (768, 1024),
    "landscape": (1024, 768),
    "square": (1024, 1024),
}
# One-letter forms used by the short CLI flags
ASPECT_ALIASES = {"P": "portrait", "L": "landscape", "S": "square"}


class GenerationRequest(BaseModel):
    # What the CLI sends
    prompt: str = ""
    model: str = "flux"
    width: Optional[int] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    aspect: Optional[AspectName] = None
    resolution: Optional[str] = None
    format: Literal["png", "jpg"] = "png"
    output: Optional[str] = None
    seed: Optional[Union[int, str]] = None
    nologo: bool = True
    private: bool = True
    nofeed: bool = True
    enhance: bool = False
    safe: bool = False
    api_key: Optional[str] = None


class GenerationResult(BaseModel):
    success: bool
    path: Optional[str] = None
    data: Optional[bytes] = None
    size: int = 0
    content_type: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, path: str, data: bytes, content_type: Optional[str]) -> "GenerationResult":
        return cls(success=True, path=path, data=data, size=len(data), content_type=content_type)

    @classmethod
    def failed(cls, exc: PollinationsError) -> "GenerationResult":
        return cls(success=False, error_kind=exc.kind, error=exc.message)


class ModelDescriptor(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    description: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)
    # cost dimension -> price, plus an optional "currency" code
    pricing: Dict[str, Union[int, float, str]] = Field(default_factory=dict)

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value):
        return None if value is None else str(value)

    @field_validator("aliases", mode="before")
    @classmethod
    def _aliases(cls, value):
        if isinstance(value, str):
            return [value]
        if not isinstance(value, (list, tuple)):
            return []
        return [str(alias) for alias in value if alias is not None]

    @field_validator("pricing", mode="before")
    @classmethod
    def _pricing(cls, value):
        # keep numeric prices and the currency code, drop anything else
        if not isinstance(value, dict):
            return {}
        pricing = {}
        for key, price in value.items():
            if key == "currency":
                if price:
                    pricing[key] = str(price)
            elif isinstance(price, (int, float)) and not isinstance(price, bool):
                pricing[key] = price
        return pricing
