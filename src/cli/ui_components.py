"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import AppInstance
from core.domain.results import Outcome


def build_outcomes_table(outcomes: Mapping[str, Outcome[Any]], *, title: str) -> Table:
    """Una fila por topic: estado, tipo de error y detalle."""

    table = Table(title=title)
    table.add_column("Topic", style="cyan", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    for key, outcome in outcomes.items():
        if outcome.ok:
            table.add_row(key, Text("OK", style="green"), json.dumps(outcome.value, ensure_ascii=False))
        else:
            error = outcome.error
            status = f" ({error.status_code})" if error.status_code else ""
            table.add_row(key, Text(f"{type(error).__name__}{status}", style="red"), error.message)
    return table


def build_instance_panel(instance: AppInstance) -> Panel:
    """Panel para presentar un `AppInstance` y sus suscripciones."""

    body = Text()
    body.append("Token: ", style="bold")
    body.append(f"{instance.registration_token}\n")
    if instance.application:
        body.append("Application: ", style="bold")
        body.append(f"{instance.application}\n")
    if instance.platform:
        body.append("Platform: ", style="bold")
        body.append(f"{instance.platform}\n")

    body.append("\nTopics:\n", style="bold")
    if not instance.topic_subscriptions:
        body.append("  (none)\n", style="dim")
    for sub in instance.topic_subscriptions:
        since = f"  since {sub.subscribed_at.isoformat()}" if sub.subscribed_at else ""
        body.append(f"- {sub.topic}{since}\n")

    return Panel(body, title=Text("App instance", style="bold yellow"), border_style="yellow")
