"""
Shared building blocks for the gifting apps.

- exceptions: domain exception taxonomy
- money: cent-precise Decimal helpers
- retry: retry-on-conflict decorator for ledger writes
- events: fire-and-forget change signals
"""
