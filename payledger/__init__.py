"""PayLedger: obligations settled by exact, oldest-first payments."""
