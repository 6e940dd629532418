"""UI-facing copy builders for status lines, empty states, and notifications."""

from __future__ import annotations

from movie_house.models import TRANSPORT_ERROR_MESSAGE, SearchMode, SearchState


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_search_error_message(error: str) -> str:
    """Build the status-line copy for a failed search."""
    if error == TRANSPORT_ERROR_MESSAGE:
        return build_actionable_error(
            "fetch movies",
            why="a network error occurred or the service sent an invalid response",
            next_step="check connectivity and press r to retry",
        )
    return f"{error}\n{build_next_step_hint('try another title or change the filters')}"


def build_results_header(state: SearchState) -> str:
    """Build the list header, e.g. ``Search · batman (20 shown, page 2/5)``."""
    label = "Discover" if state.mode is SearchMode.DISCOVERY else "Search"
    query = state.effective_query or "…"
    count = len(state.results)
    return f" {label} · {query} ({count} shown, page {state.page}/{state.total_pages})"


def build_list_empty_message(state: SearchState) -> str:
    """Build actionable empty-state copy for the results list."""
    if state.loading:
        return "[dim italic]Loading movies...[/]"
    if state.error:
        return (
            "[dim italic]No movies to show.[/]\n"
            "[dim]Try: edit the search text, or press [bold]ctrl+l[/bold] to clear all.[/]"
        )
    return (
        "[dim italic]No movies yet.[/]\n"
        "[dim]Try: press [bold]/[/bold] and type a title.[/]"
    )


__all__ = [
    "build_actionable_error",
    "build_list_empty_message",
    "build_next_step_hint",
    "build_results_header",
    "build_search_error_message",
]
