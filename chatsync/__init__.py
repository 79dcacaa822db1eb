"""Real-time chat coordination: thread identity, live sync and assistant orchestration."""
