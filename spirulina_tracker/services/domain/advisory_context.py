"""
Domain service: Context summary sent along with advisor questions.
"""
from typing import Iterable, List, Sequence

from spirulina_tracker.domain.models import ParameterLog, Pond
from spirulina_tracker.services.domain.time_series import recent_logs


NO_PONDS_CONTEXT = "The user has no ponds registered yet."


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_log_line(log: ParameterLog) -> str:
    line = (
        f"    [{log.timestamp.date().isoformat()}]: pH {_format_number(log.ph)}, "
        f"Temp {_format_number(log.temperature)}°C, "
        f"OD (density) {_format_number(log.optical_density)}"
    )
    if log.added_medium and log.added_medium > 0:
        line += f", {_format_number(log.added_medium)}L of medium added"
    return line


def build_context(
    ponds: Sequence[Pond],
    logs: Iterable[ParameterLog],
    recent_count: int = 3,
) -> str:
    """
    Summarize the user's ponds and their latest logs for the advisor.

    Args:
        ponds: All ponds, in stored order
        logs: All parameter logs
        recent_count: Logs per pond to include, most recent first

    Returns:
        Plain-text context block
    """
    if not ponds:
        return NO_PONDS_CONTEXT

    logs = list(logs)
    lines: List[str] = ["Current culture information:"]
    for pond in ponds:
        lines.append(
            f"- Pond: {pond.name} ({_format_number(pond.volume)}L, "
            f"Status: {pond.status.value})."
        )
        pond_logs = recent_logs(logs, pond.id)[:recent_count]
        if pond_logs:
            lines.append("  Latest logs:")
            lines.extend(format_log_line(log) for log in pond_logs)
        else:
            lines.append("  No recent logs.")
    return "\n".join(lines) + "\n"
