# Per-request flow states. None of these are persisted; the only stored
# state is the participant's current node id.

# Anonymous or first-touch request: entry node rendered, nothing validated
AT_ENTRY = "AT_ENTRY"

# Known participant, no submission: current node rendered again
AWAITING_INPUT = "AWAITING_INPUT"

# Submission rejected: current node re-rendered with an error, position kept
INVALID = "INVALID"

# Submission accepted and an outgoing edge resolved: position moved
ADVANCED = "ADVANCED"

# Submission accepted with nowhere to go: completion rendered, position kept
TERMINAL = "TERMINAL"
