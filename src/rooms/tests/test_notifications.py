from datetime import time, timedelta
from unittest import mock

import pytest
from django.conf import settings as django_settings
from django.core import mail
from django.utils import timezone

from src.rooms import notifications
from src.rooms.factories import BookingFactory

pytestmark = pytest.mark.django_db


@pytest.fixture
def booking(room, member):
    return BookingFactory(
        room=room, user=member, date=timezone.localdate() + timedelta(days=2),
        start_time=time(9), end_time=time(10), confirmed=True,
    )


def test_dispatch_sends_after_commit(booking, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        notifications.dispatch_notifications([notifications.status_update(booking)])
        assert mail.outbox == []

    assert len(callbacks) == 1
    assert len(mail.outbox) == 1
    message = mail.outbox[0]
    assert message.to == [booking.user.email]
    assert message.subject == "Booking Confirmed - Boardroom"
    assert "Boardroom" in message.body
    assert "<h2" not in message.body
    assert message.alternatives[0][1] == "text/html"


def test_none_intents_are_dropped(booking, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        notifications.dispatch_notifications([None, None])
    assert callbacks == []


def test_async_dispatch_hands_batch_to_daemon_thread(booking, settings, django_capture_on_commit_callbacks):
    settings.BOOKING_EMAIL_ASYNC = True
    intent = notifications.status_update(booking)
    with mock.patch.object(notifications.threading, "Thread") as thread_cls:
        with django_capture_on_commit_callbacks(execute=True):
            notifications.dispatch_notifications([intent])
            thread_cls.assert_not_called()

    thread_cls.assert_called_once()
    kwargs = thread_cls.call_args.kwargs
    assert kwargs["target"] is notifications.send_notifications
    assert kwargs["args"] == ([intent],)
    assert kwargs["daemon"] is True
    thread_cls.return_value.start.assert_called_once_with()
    assert mail.outbox == []


def test_smtp_timeout_is_bounded():
    assert 0 < django_settings.EMAIL_TIMEOUT <= 30


def test_send_failure_is_logged_and_swallowed(booking, caplog):
    with mock.patch.object(notifications, "send_mail", side_effect=ConnectionRefusedError("smtp down")):
        assert notifications.send_notification(notifications.reminder(booking)) is False
    assert "Failed to send" in caplog.text


def test_admin_intents_need_a_mailbox(booking, settings):
    settings.BOOKING_ADMIN_EMAIL = ""
    assert notifications.admin_cancellation_notice(booking) is None

    settings.BOOKING_ADMIN_EMAIL = "desk@example.com"
    intent = notifications.admin_cancellation_notice(booking)
    assert intent.to == "desk@example.com"


def test_cancellation_notice_includes_reason(booking):
    booking.cancellation_reason = "Workshop postponed"
    notifications.send_notification(notifications.cancellation_notice(booking))
    assert "Workshop postponed" in mail.outbox[0].body
