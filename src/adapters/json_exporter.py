"""Exportación JSON de resultados.

Por qué JSON:
- Permite encadenar la CLI con otras herramientas (jq, pipelines).
- Los `Failure` se serializan con tipo de error, status y payload del proveedor.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from core.domain.errors import MessagingError
from core.domain.models import AppInstance
from core.domain.results import Outcome


def error_to_jsonable(error: MessagingError) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": type(error).__name__,
        "message": error.message,
        "status_code": error.status_code,
    }
    if error.errors:
        data["errors"] = error.errors
    retry_after = getattr(error, "retry_after", None)
    if retry_after is not None:
        data["retry_after"] = retry_after
    return data


def outcomes_to_jsonable(outcomes: Mapping[str, Outcome[Any]]) -> dict[str, Any]:
    """`{topic: {"ok": true, "result": ...} | {"ok": false, "error": ...}}`."""

    out: dict[str, Any] = {}
    for key, outcome in outcomes.items():
        if outcome.ok:
            out[key] = {"ok": True, "result": outcome.value}
        else:
            out[key] = {"ok": False, "error": error_to_jsonable(outcome.error)}
    return out


def instance_to_jsonable(instance: AppInstance) -> dict[str, Any]:
    return instance.model_dump(mode="json")


def dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)


def export_json(*, payload: Any, output_path: Path) -> Path:
    """Escribe `payload` como JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dumps(payload) + "\n", encoding="utf-8")
    return output_path
