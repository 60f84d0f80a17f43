# dancelink/services/email_templates.py
# 승인 / 거절 이메일 제목 + HTML
from html import escape
from typing import Tuple

from dancelink.schemas.notification import NotificationPayload

APPROVED_HTML = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #16a34a;">Congratulations {dancer_name}! 🎉</h1>
  <p style="font-size: 16px; line-height: 1.6;">
    Your application for <strong>{event_name}</strong> has been <strong style="color: #16a34a;">approved</strong>!
  </p>
  <p style="font-size: 16px; line-height: 1.6;">
    The event organizer <strong>{organizer_name}</strong> has reviewed your profile and would love to have you participate.
  </p>
  <p style="font-size: 16px; line-height: 1.6;">
    Log in to your dashboard to see more details and connect with the organizer.
  </p>
  <div style="margin-top: 30px; padding: 20px; background-color: #f0fdf4; border-left: 4px solid #16a34a;">
    <p style="margin: 0; color: #15803d;">
      <strong>Next Steps:</strong><br/>
      1. Check your dashboard for event details<br/>
      2. Prepare for the performance<br/>
      3. Stay in touch with the organizer
    </p>
  </div>
  <p style="margin-top: 30px; color: #666; font-size: 14px;">
    Best regards,<br/>
    <strong>DanceLink Team</strong>
  </p>
</div>
"""

REJECTED_HTML = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #dc2626;">Application Update</h1>
  <p style="font-size: 16px; line-height: 1.6;">
    Dear {dancer_name},
  </p>
  <p style="font-size: 16px; line-height: 1.6;">
    Thank you for your interest in <strong>{event_name}</strong>. After careful consideration, the organizer has decided not to move forward with your application at this time.
  </p>
  <p style="font-size: 16px; line-height: 1.6;">
    We encourage you to keep improving your skills and apply for other events on DanceLink!
  </p>
  <div style="margin-top: 30px; padding: 20px; background-color: #fef2f2; border-left: 4px solid #dc2626;">
    <p style="margin: 0; color: #991b1b;">
      Don't give up! Keep dancing and exploring new opportunities.
    </p>
  </div>
  <p style="margin-top: 30px; color: #666; font-size: 14px;">
    Best regards,<br/>
    <strong>DanceLink Team</strong>
  </p>
</div>
"""


def render_notification(payload: NotificationPayload) -> Tuple[str, str]:
    """(subject, html) 반환. 이름들은 HTML escape."""
    values = {
        "dancer_name": escape(payload.dancerName),
        "event_name": escape(payload.eventName),
        "organizer_name": escape(payload.organizerName),
    }
    if payload.status == "approved":
        subject = f"🎉 Your application for {payload.eventName} has been approved!"
        return subject, APPROVED_HTML.format(**values)

    subject = f"Application Update for {payload.eventName}"
    return subject, REJECTED_HTML.format(**values)
