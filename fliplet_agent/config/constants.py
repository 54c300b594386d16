"""
Application constants

Fixed values that are part of the agent's observable behavior and are
not meant to be tuned per deployment.
"""

# ============================================================================
# Agent loop
# ============================================================================

# Returned when a turn spends its whole round budget without an end_turn
TOOL_LIMIT_REPLY = "Hit the tool-call limit. Try a more specific question."


# ============================================================================
# Backend payloads
# ============================================================================

# Field holding the rows of a data source listing
ENTRIES_FIELD = "entries"

TRUNCATION_NOTE = (
    "Showing first {shown} of {total} entries. Ask the user if they need more."
)
