"""Services Layer — imperative shell around the core rules.

Invariants:
    - Each service receives its AsyncSession (and NotificationSink) in __init__
    - Services raise core errors; they never build HTTP responses

Design Decisions:
    - One service per aggregate (intents, registration, members, referrals,
      dashboard, auth) for locality
"""
