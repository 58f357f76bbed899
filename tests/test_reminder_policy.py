import logging
from datetime import datetime, timedelta

import pytest

from vignette.reminders import Channel, ErrorKind, PolicyError, ReminderPolicy, ReminderRequest, ReminderResult


def test_email_registration_computes_dates_and_masks(policy: ReminderPolicy, now: datetime):
    result = policy.register(True, "ku - 123 xy", "max.mustermann@firma.at", Channel.EMAIL, now=now)

    assert isinstance(result, ReminderResult)
    assert result.readable_plate == "KU-123XY"
    assert result.region_code == "KU"
    assert result.district_name == "Kufstein"
    assert result.today == now
    assert result.expiry_date == now + timedelta(days=365)
    assert result.reminder_date == now + timedelta(days=351)
    assert result.masked_contact == "max***@firma.at"
    assert result.action.kind == "double_opt_in_link"
    assert result.action.secret == "a" * 64
    assert "a" * 64 in result.action.description


def test_sms_registration_masks_phone(policy: ReminderPolicy, now: datetime):
    result = policy.register(True, "W-789", "+436641234567", Channel.SMS, now=now)

    assert isinstance(result, ReminderResult)
    assert result.masked_contact == "+43***567"
    assert result.action.kind == "sms_code"
    assert result.action.secret == "042817"
    assert result.action.valid_minutes == 10
    assert "042817" not in result.action.description


def test_now_defaults_to_clock(policy: ReminderPolicy, now: datetime):
    result = policy.register(True, "G-12", "x@firma.at", Channel.EMAIL)
    assert result.today == now


def test_missing_consent_stops_before_parsing(policy: ReminderPolicy, monkeypatch):
    def _boom(_raw):
        raise AssertionError("plate must not be parsed without consent")

    monkeypatch.setattr(policy.parser, "parse", _boom)

    result = policy.register(False, "not a plate at all !!!", "daten@schutz.at", Channel.SMS)
    assert isinstance(result, PolicyError)
    assert result.kind is ErrorKind.CONSENT_DENIED
    assert not result.retryable


@pytest.mark.parametrize("plate", ["W1", "XYZ-123", "123"])
def test_malformed_plate_carries_parser_detail(policy: ReminderPolicy, plate):
    result = policy.register(True, plate, "test@test.at", Channel.EMAIL)
    assert isinstance(result, PolicyError)
    assert result.kind is ErrorKind.MALFORMED_PLATE
    assert plate in result.detail
    assert result.retryable


@pytest.mark.parametrize("plate", ["XX-123", "KL-1", "A-55"])
def test_unknown_district(policy: ReminderPolicy, plate):
    result = policy.register(True, plate, "test@test.at", Channel.EMAIL)
    assert isinstance(result, PolicyError)
    assert result.kind is ErrorKind.UNKNOWN_DISTRICT
    assert "W, KU, L, B, G, Z, AM, H, M, K" in result.detail


def test_district_is_checked_before_contact(policy: ReminderPolicy):
    result = policy.register(True, "XX-123", "not-an-email", Channel.EMAIL)
    assert result.kind is ErrorKind.UNKNOWN_DISTRICT


def test_phone_number_for_email_channel_is_mismatch(policy: ReminderPolicy):
    result = policy.register(True, "W-111", "+43664123456", Channel.EMAIL)
    assert isinstance(result, PolicyError)
    assert result.kind is ErrorKind.CONTACT_MISMATCH
    assert "E-Mail-Adresse" in result.detail
    assert "+43664123456" not in result.detail


@pytest.mark.parametrize("contact", ["max@firma.at", "12345", "+43 664 1234567", "+1234567890123456"])
def test_sms_channel_rejects_non_numbers(policy: ReminderPolicy, contact):
    result = policy.register(True, "W-111", contact, Channel.SMS)
    assert result.kind is ErrorKind.CONTACT_MISMATCH


@pytest.mark.parametrize("contact", ["1234567", "+436641234567", "004366412345"])
def test_sms_channel_accepts_numbers(policy: ReminderPolicy, contact):
    assert isinstance(policy.register(True, "W-111", contact, Channel.SMS), ReminderResult)


def test_success_log_never_contains_raw_contact(policy: ReminderPolicy, caplog):
    caplog.set_level(logging.INFO, logger="vignette")

    policy.register(True, "ku-123xy", "max.mustermann@firma.at", Channel.EMAIL)

    messages = [rec.getMessage() for rec in caplog.records]
    assert any("max***@firma.at" in msg for msg in messages)
    assert not any("max.mustermann" in msg for msg in messages)


def test_failures_are_logged_as_warnings(policy: ReminderPolicy, caplog):
    caplog.set_level(logging.WARNING, logger="vignette")

    policy.register(False, "W-1", "a@b.at", Channel.EMAIL)

    assert any(rec.levelno == logging.WARNING and "no consent" in rec.getMessage() for rec in caplog.records)


def test_default_token_generators_are_random():
    policy = ReminderPolicy()
    first = policy.register(True, "W-12", "a@firma.at", Channel.EMAIL)
    second = policy.register(True, "W-12", "a@firma.at", Channel.EMAIL)
    assert len(first.action.secret) == 64
    assert first.action.secret != second.action.secret

    sms = policy.register(True, "W-12", "+436641234567", Channel.SMS)
    assert len(sms.action.secret) == 6
    assert sms.action.secret.isdigit()


def test_register_request_maps_label(policy: ReminderPolicy):
    request = ReminderRequest(has_consent=True, plate="W-789", contact="+436641234567", channel="SMS")
    result = policy.register_request(request)
    assert isinstance(result, ReminderResult)
    assert result.channel is Channel.SMS


@pytest.mark.parametrize("label", ["Email", "email", "E-MAIL", "Fax", None])
def test_register_request_rejects_unknown_labels(policy: ReminderPolicy, label):
    request = ReminderRequest(has_consent=True, plate="W-789", contact="a@firma.at", channel=label)
    result = policy.register_request(request)
    assert result.kind is ErrorKind.INVALID_INPUT


@pytest.mark.parametrize("consent", ["yes", 1, None])
def test_register_request_requires_strict_bool(policy: ReminderPolicy, consent):
    request = ReminderRequest(has_consent=consent, plate="W-789", contact="a@firma.at", channel="E-Mail")
    assert policy.register_request(request).kind is ErrorKind.INVALID_INPUT


def test_register_request_consent_before_field_checks(policy: ReminderPolicy):
    request = ReminderRequest(has_consent=False, plate="", contact="", channel="Fax")
    assert policy.register_request(request).kind is ErrorKind.CONSENT_DENIED


@pytest.mark.parametrize("field_name", ["plate", "contact"])
def test_register_request_rejects_empty_fields(policy: ReminderPolicy, field_name):
    values = {"has_consent": True, "plate": "W-789", "contact": "a@firma.at", "channel": "E-Mail"}
    values[field_name] = "   "
    result = policy.register_request(ReminderRequest(**values))
    assert result.kind is ErrorKind.INVALID_INPUT
    assert field_name in result.detail


def test_registration_is_deterministic_with_fixed_inputs(policy: ReminderPolicy, now: datetime):
    first = policy.register(True, "KU-123XY", "max@firma.at", Channel.EMAIL, now=now)
    second = policy.register(True, "KU-123XY", "max@firma.at", Channel.EMAIL, now=now)
    assert first == second


def test_unknown_district_message_lists_only_configured_codes(policy: ReminderPolicy):
    result = policy.register(True, "XX-123", "a@firma.at", Channel.EMAIL)
    assert result.detail.endswith("Gültige Bezirke: W, KU, L, B, G, Z, AM, H, M, K")


def test_non_ascii_email_is_mismatch(policy: ReminderPolicy):
    result = policy.register(True, "W-12", "müller@firma.at", Channel.EMAIL)
    assert isinstance(result, PolicyError)
    assert result.kind is ErrorKind.CONTACT_MISMATCH


@pytest.mark.parametrize("label, expected", [("SMS", Channel.SMS), ("E-Mail", Channel.EMAIL)])
def test_register_accepts_exact_channel_label(policy: ReminderPolicy, label, expected):
    contact = "+436641234567" if expected is Channel.SMS else "max@firma.at"
    result = policy.register(True, "W-789", contact, label)
    assert isinstance(result, ReminderResult)
    assert result.channel is expected


@pytest.mark.parametrize("channel", ["sms", "Fax", None, 42])
def test_register_rejects_unrecognized_channel(policy: ReminderPolicy, channel, monkeypatch):
    def _boom(_raw):
        raise AssertionError("plate must not be parsed for an unknown channel")

    monkeypatch.setattr(policy.parser, "parse", _boom)

    result = policy.register(True, "W-789", "+436641234567", channel)
    assert isinstance(result, PolicyError)
    assert result.kind is ErrorKind.INVALID_INPUT


def test_unrecognized_channel_still_needs_consent_first(policy: ReminderPolicy):
    assert policy.register(False, "W-789", "a@firma.at", "Fax").kind is ErrorKind.CONSENT_DENIED
