"""Message templates for every notification type.

Each renderer is pure: given the recipient, payload, display timezone and the
current time it returns the SMS text plus the email subject and HTML. ``now``
only feeds the "sent at" line of the email footer.
"""

from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Callable, Dict, Optional

from medpal.schemas.notifications import NotificationData, NotificationType, Recipient
from medpal.utils.timezone import format_datetime, format_time


@dataclass(frozen=True)
class RenderedMessage:
    sms_body: str
    email_subject: str
    email_html: str


_BASE_STYLE = """
        body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
        .container { max-width: 600px; margin: 0 auto; padding: 20px; }
        .header { background: %(gradient)s; color: white; padding: 20px; text-align: center; border-radius: 10px 10px 0 0; }
        .content { background: #f9f9f9; padding: 20px; border-radius: 0 0 10px 10px; }
        .card { background: white; padding: 20px; margin: 20px 0; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); border-left: 4px solid %(accent)s; }
        .time { background: %(time_bg)s; padding: 10px; border-radius: 5px; text-align: center; font-weight: bold; }
        .footer { text-align: center; margin-top: 20px; color: #666; font-size: 14px; }
"""

_THEMES = {
    "reminder": {"gradient": "linear-gradient(135deg, #667eea 0%, #764ba2 100%)", "accent": "#667eea", "time_bg": "#e3f2fd"},
    "critical": {"gradient": "linear-gradient(135deg, #d32f2f 0%, #b71c1c 100%)", "accent": "#d32f2f", "time_bg": "#ffebee"},
    "alert": {"gradient": "linear-gradient(135deg, #ff6b6b 0%, #ee5a24 100%)", "accent": "#ff6b6b", "time_bg": "#ffebee"},
    "stock": {"gradient": "linear-gradient(135deg, #ffa726 0%, #ff9800 100%)", "accent": "#ffa726", "time_bg": "#fff3e0"},
    "appointment": {"gradient": "linear-gradient(135deg, #26a69a 0%, #00897b 100%)", "accent": "#26a69a", "time_bg": "#e0f2f1"},
}


def _email_layout(
    *,
    theme: str,
    title: str,
    name: str,
    lead: str,
    card: str,
    actions: list[str],
    note: str,
    footer: str,
    sent_at: str,
) -> str:
    style = _BASE_STYLE % _THEMES[theme]
    items = "\n".join(f"            <li>{a}</li>" for a in actions)
    return f"""<!DOCTYPE html>
<html>
<head>
    <style>{style}    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{title}</h1>
        </div>
        <div class="content">
            <h2>Hi {escape(name)},</h2>
            <p>{lead}</p>
            <div class="card">
{card}
            </div>
            <p><strong>Please:</strong></p>
            <ul>
{items}
            </ul>
            <p>{note}</p>
        </div>
        <div class="footer">
            <p>This is an automated message from MedPal - Your trusted healthcare companion</p>
            <p>{footer}</p>
            <p>Sent {escape(sent_at)}</p>
        </div>
    </div>
</body>
</html>
"""


def _dosage_line(dosage: Optional[str]) -> str:
    return f"\n📏 {dosage}" if dosage else ""


def _dosage_html(dosage: Optional[str]) -> str:
    return f"\n                <p><strong>Dosage:</strong> {escape(dosage)}</p>" if dosage else ""


def render_medicine_reminder(recipient: Recipient, data: NotificationData, tz_name: str, now: datetime) -> RenderedMessage:
    sms = (
        f"🔔 MEDPAL REMINDER 🔔\n\nHi {recipient.name},\n\n"
        f"It's time to take your medicine:\n💊 {data.medicine}{_dosage_line(data.dosage)}\n"
        f"⏰ {format_time(data.reminder_time, tz_name)}\n\n"
        "Please take it now and mark as taken in the app.\n\nStay healthy! 💪"
    )
    card = (
        f"                <h3>💊 {escape(data.medicine)}</h3>{_dosage_html(data.dosage)}\n"
        f"                <div class=\"time\">⏰ {escape(format_datetime(data.reminder_time, tz_name))}</div>"
    )
    html = _email_layout(
        theme="reminder",
        title="🔔 MedPal Medicine Reminder",
        name=recipient.name,
        lead="It's time to take your medicine!",
        card=card,
        actions=[
            "Take your medicine now",
            "Mark it as taken in the MedPal app",
            "Stay on schedule for better health",
        ],
        note="If you have any questions, please consult your healthcare provider.",
        footer="Stay healthy! 💪",
        sent_at=format_datetime(now, tz_name),
    )
    return RenderedMessage(sms, "🔔 MedPal Medicine Reminder", html)


def render_critical_medicine_reminder(recipient: Recipient, data: NotificationData, tz_name: str, now: datetime) -> RenderedMessage:
    sms = (
        f"🚨 MEDPAL CRITICAL REMINDER 🚨\n\nHi {recipient.name},\n\n"
        f"This dose must not be skipped:\n💊 {data.medicine}{_dosage_line(data.dosage)}\n"
        f"⏰ {format_time(data.reminder_time, tz_name)}\n\n"
        "Take it now. If you cannot, contact your healthcare provider immediately."
    )
    card = (
        f"                <h3>💊 {escape(data.medicine)}</h3>{_dosage_html(data.dosage)}\n"
        f"                <div class=\"time\">⏰ {escape(format_datetime(data.reminder_time, tz_name))}</div>"
    )
    html = _email_layout(
        theme="critical",
        title="🚨 MedPal Critical Medicine Reminder",
        name=recipient.name,
        lead="<strong>This is a critical medicine. Please do not skip this dose.</strong>",
        card=card,
        actions=[
            "Take your medicine right away",
            "Mark it as taken in the MedPal app",
            "Contact your healthcare provider if you cannot take it",
        ],
        note="<strong>Important:</strong> Missing this medicine may affect your treatment.",
        footer="Your health comes first! 💪",
        sent_at=format_datetime(now, tz_name),
    )
    return RenderedMessage(sms, "🚨 MedPal Critical Medicine Reminder", html)


def render_missed_medicine_alert(recipient: Recipient, data: NotificationData, tz_name: str, now: datetime) -> RenderedMessage:
    sms = (
        f"⚠️ MEDPAL ALERT ⚠️\n\nHi {recipient.name},\n\n"
        f"You missed taking your medicine:\n💊 {data.medicine}{_dosage_line(data.dosage)}\n"
        f"⏰ {format_time(data.reminder_time, tz_name)}\n\n"
        "Please take it as soon as possible and update the app.\n\n"
        "If you need assistance, contact your healthcare provider."
    )
    card = (
        f"                <h3>💊 {escape(data.medicine)}</h3>{_dosage_html(data.dosage)}\n"
        f"                <div class=\"time\">⏰ {escape(format_datetime(data.reminder_time, tz_name))}</div>"
    )
    html = _email_layout(
        theme="alert",
        title="⚠️ MedPal Missed Medicine Alert",
        name=recipient.name,
        lead="<strong>You missed taking your medicine!</strong>",
        card=card,
        actions=[
            "Take your medicine as soon as possible",
            "Mark it as taken in the MedPal app",
            "Check if you need to adjust your schedule",
        ],
        note="<strong>Important:</strong> If you're unsure about taking a missed dose, please consult your healthcare provider.",
        footer="Stay on track with your health! 💪",
        sent_at=format_datetime(now, tz_name),
    )
    return RenderedMessage(sms, "⚠️ MedPal Missed Medicine Alert", html)


def render_low_stock_alert(recipient: Recipient, data: NotificationData, tz_name: str, now: datetime) -> RenderedMessage:
    sms = (
        f"📦 MEDPAL STOCK ALERT 📦\n\nHi {recipient.name},\n\n"
        f"Your medicine stock is running low:\n💊 {data.medicine}\n"
        f"📊 Current: {data.current_stock}\n⚠️ Threshold: {data.threshold}\n\n"
        "Please refill your prescription soon to avoid running out.\n\nStay prepared! 💪"
    )
    card = (
        f"                <h3>💊 {escape(data.medicine)}</h3>\n"
        f"                <p><strong>Current Stock:</strong> {data.current_stock}</p>\n"
        f"                <p><strong>Low Stock Threshold:</strong> {data.threshold}</p>"
    )
    html = _email_layout(
        theme="stock",
        title="📦 MedPal Stock Alert",
        name=recipient.name,
        lead="<strong>Your medicine stock is running low!</strong>",
        card=card,
        actions=[
            "Refill your prescription soon",
            "Contact your pharmacy or healthcare provider",
            "Update your inventory in the MedPal app",
        ],
        note="Don't wait until you run out - stay prepared for your health!",
        footer="Stay prepared! 💪",
        sent_at=format_datetime(now, tz_name),
    )
    return RenderedMessage(sms, "📦 MedPal Stock Alert", html)


def render_appointment_reminder(recipient: Recipient, data: NotificationData, tz_name: str, now: datetime) -> RenderedMessage:
    sms = (
        f"📅 MEDPAL APPOINTMENT 📅\n\nHi {recipient.name},\n\n"
        f"Reminder of your upcoming appointment:\n🩺 {data.appointment}\n\n"
        "Please arrive a few minutes early and bring your medication list."
    )
    card = f"                <h3>🩺 {escape(data.appointment)}</h3>"
    html = _email_layout(
        theme="appointment",
        title="📅 MedPal Appointment Reminder",
        name=recipient.name,
        lead="You have an upcoming appointment.",
        card=card,
        actions=[
            "Arrive a few minutes early",
            "Bring your current medication list",
            "Reschedule in advance if you cannot attend",
        ],
        note="If you have any questions, please contact your healthcare provider.",
        footer="See you there! 💪",
        sent_at=format_datetime(now, tz_name),
    )
    return RenderedMessage(sms, "📅 MedPal Appointment Reminder", html)


def render_refill_reminder(recipient: Recipient, data: NotificationData, tz_name: str, now: datetime) -> RenderedMessage:
    days = "day" if data.days_left == 1 else "days"
    sms = (
        f"💊 MEDPAL REFILL REMINDER 💊\n\nHi {recipient.name},\n\n"
        f"Your supply of {data.medicine} runs out in {data.days_left} {days}.\n\n"
        "Please arrange a refill with your pharmacy soon."
    )
    card = (
        f"                <h3>💊 {escape(data.medicine)}</h3>\n"
        f"                <div class=\"time\">⏳ {data.days_left} {days} left</div>"
    )
    html = _email_layout(
        theme="stock",
        title="💊 MedPal Refill Reminder",
        name=recipient.name,
        lead="Your medicine supply is about to run out.",
        card=card,
        actions=[
            "Order a refill from your pharmacy",
            "Ask your doctor for a new prescription if needed",
            "Update your inventory in the MedPal app",
        ],
        note="Refilling early keeps your treatment on schedule.",
        footer="Stay prepared! 💪",
        sent_at=format_datetime(now, tz_name),
    )
    return RenderedMessage(sms, "💊 MedPal Refill Reminder", html)


Renderer = Callable[[Recipient, NotificationData, str, datetime], RenderedMessage]

RENDERERS: Dict[NotificationType, Renderer] = {
    NotificationType.MEDICINE_REMINDER: render_medicine_reminder,
    NotificationType.CRITICAL_MEDICINE_REMINDER: render_critical_medicine_reminder,
    NotificationType.MISSED_MEDICINE_ALERT: render_missed_medicine_alert,
    NotificationType.LOW_STOCK_ALERT: render_low_stock_alert,
    NotificationType.APPOINTMENT_REMINDER: render_appointment_reminder,
    NotificationType.REFILL_REMINDER: render_refill_reminder,
}
