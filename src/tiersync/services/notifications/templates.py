def reconciliation_failure_to_slack_text(
    *,
    event_id: str | None,
    event_type: str | None,
    error: str,
) -> str:
    lines = [
        "🚨 *Tier sync failed* (Stripe will retry)",
        f"*Event:* {event_id or '-'}",
        f"*Type:* {event_type or '-'}",
        f"*Error:* `{error[:500]}`",
    ]
    return "\n".join(lines)
