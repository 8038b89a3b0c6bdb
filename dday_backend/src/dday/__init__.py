"""
D-Day task tracker backend package.

The pure engine lives in dates, urgency, ordering and notifications; the
FastAPI app in main wraps it with storage, a clock and a JSON API.
"""
