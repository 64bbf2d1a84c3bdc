import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.mail import send_mail

from storefront_backend.errors import ValidationError
from .models import Feedback

logger = logging.getLogger(__name__)


def submit_feedback(data):
    """
    Stores a feedback entry and thanks the sender by email. The email is best
    effort; the entry is kept even if it cannot be sent.
    """
    if not all([data.get('full_name'), data.get('email'), data.get('message')]):
        raise ValidationError(
            [{'error': 'full_name, email and message are required'}],
            message="Please fill all required fields",
        )

    feedback = Feedback(
        full_name=data['full_name'],
        email=data['email'],
        phone=data.get('phone'),
        message=data['message'],
        rating=data.get('rating'),
    )
    try:
        feedback.full_clean()
    except DjangoValidationError as e:
        errors = [{'field': field, 'error': ' '.join(messages)} for field, messages in e.message_dict.items()]
        raise ValidationError(errors) from e

    feedback.save()
    logger.info(f"Stored feedback {feedback.id} from {feedback.email}")
    send_feedback_thanks(feedback.email, feedback.full_name)
    return feedback


def send_feedback_thanks(to_email, full_name):
    subject = "Thank You for Your Feedback!"
    message = (
        f"Thank you, {full_name}!\n\n"
        f"We're super grateful for your feedback. Your thoughts help us bake better.\n\n"
        f"With love,\n{settings.STORE_NAME}"
    )
    try:
        send_mail(subject, message, settings.DEFAULT_FROM_EMAIL, [to_email])
        logger.info(f"Feedback thank-you email sent to {to_email}")
    except Exception as e:
        logger.error(f"Error sending feedback email to {to_email}: {e}")
