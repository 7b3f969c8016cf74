import hashlib
import json
from typing import Any, Mapping, Sequence

from pydantic import ValidationError


def validation_error_parser(
    error: ValidationError, component: str = "config.settings"
) -> list[dict[str, str]]:
    parsed_error = [
        {
            "component": component,
            "path": ".".join(map(str, err["loc"])),
            "message": err["msg"],
            "error_type": err["type"],
        }
        for err in error.errors()
    ]
    return parsed_error


def sort_mapping(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return {k: sort_mapping(obj[k]) for k in sorted(obj)}
    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes, bytearray)):
        return [sort_mapping(item) for item in obj]
    return obj


def compute_hash(cfg: Mapping[str, Any]) -> str:
    """sha256 over the canonical (sorted, compact) JSON form of ``cfg``."""
    canonical = sort_mapping(cfg)
    payload = json.dumps(canonical, separators=(",", ":"), ensure_ascii=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
