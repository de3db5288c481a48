from prometheus_client import Counter


notifications_sent_total = Counter(
    "medpal_notifications_sent_total",
    "Total notifications accepted by a channel transport",
    ["channel"],
)

notifications_failed_total = Counter(
    "medpal_notifications_failed_total",
    "Total notification attempts that were not delivered",
    ["channel", "outcome"],
)

notification_requests_total = Counter(
    "medpal_notification_requests_total",
    "Total notification requests dispatched",
    ["type"],
)

otp_dispatched_total = Counter(
    "medpal_otp_dispatched_total",
    "Total one-time codes handed to the SMS channel",
)

auth_events_total = Counter(
    "medpal_auth_events_total",
    "Registration and login attempts by outcome",
    ["operation", "outcome"],
)
