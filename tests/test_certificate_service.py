"""
Tests for certificate rendering and issuance
"""

import re
from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from fdp_portal.services.certificate_service import (
    format_fdp_dates,
    generate_certificate_id,
    render_template,
)
from fdp_portal.services.template_service import TemplateService


def test_certificate_id_format():
    certificate_id = generate_certificate_id("abcdef12-3456-7890", datetime(2025, 1, 5, tzinfo=timezone.utc))

    assert certificate_id == "CERT-1736035200000-ABCDEF12"
    assert re.fullmatch(r"CERT-\d+-ABCDEF12", generate_certificate_id("abcdef12-3456-7890"))


def test_naive_datetimes_are_utc():
    assert generate_certificate_id("x", datetime(2025, 1, 5)) == "CERT-1736035200000-X"


def test_render_template_blanks_missing_values():
    html = render_template(
        "<h1>{{participant_name}}</h1><p>{{ college_name }}</p><i>{{unknown}}</i>",
        {"participant_name": "Jane <Doe>", "college_name": None},
    )

    assert html == "<h1>Jane &lt;Doe&gt;</h1><p></p><i></i>"


def test_fdp_dates():
    assert format_fdp_dates(datetime(2025, 1, 5), datetime(2025, 1, 9)) == "Jan 05, 2025 - Jan 09, 2025"
    assert format_fdp_dates(datetime(2025, 1, 5), datetime(2025, 1, 5, 18)) == "Jan 05, 2025"


def test_unknown_template_tokens():
    assert TemplateService.unknown_tokens("{{participant_name}} {{nickname}} {{ fdp_title }}") == ["nickname"]


async def test_issue_certificate_stores_pdf_and_flags_registration(
    certificates, paid_faculty, store, storage, pdf_engine
):
    faculty = await paid_faculty()
    event = await store.get_event(faculty["fdp_id"])

    certificate = await certificates.issue_certificate(faculty, event)

    assert re.fullmatch(rf"CERT-\d+-{faculty['id'][:8].upper()}", certificate["certificate_id"])
    assert certificate["certificate_url"] == f"/uploads/certificates/{certificate['certificate_id']}.pdf"
    stored = storage.root / "certificates" / f"{certificate['certificate_id']}.pdf"
    assert stored.read_bytes() == b"%PDF-1.4 test"
    assert certificate["participant_name"] == "Jane Doe"
    assert certificate["college_name"] == "State Engineering College"
    assert "Jan 05, 2025" in pdf_engine.rendered[0]

    updated = await store.get_faculty_registration(faculty["id"])
    assert updated["certificate_generated"] is True
    assert updated["certificate_url"] == certificate["certificate_url"]


async def test_second_issue_conflicts(certificates, paid_faculty, store):
    faculty = await paid_faculty()
    event = await store.get_event(faculty["fdp_id"])
    await certificates.issue_certificate(faculty, event)

    with pytest.raises(HTTPException) as exc:
        await certificates.issue_certificate(faculty, event)

    assert exc.value.status_code == 409
    assert len(await store.list_certificates(event["id"])) == 1


async def test_default_template_row_is_used(certificates, paid_faculty, store, pdf_engine):
    await store.create_certificate_template({
        "name": "Plain",
        "html_template": "<p>{{participant_name}} / {{signature_image}}</p>",
        "signature_image": "/uploads/logos/sign.png",
        "is_default": True,
    })
    faculty = await paid_faculty()
    event = await store.get_event(faculty["fdp_id"])

    certificate = await certificates.issue_certificate(faculty, event)

    assert pdf_engine.rendered[0] == "<p>Jane Doe / http://api.test/uploads/logos/sign.png</p>"
    assert certificate["signature_image"] == "http://api.test/uploads/logos/sign.png"


async def test_render_failure_is_bad_gateway(certificates, paid_faculty, store, pdf_engine):
    pdf_engine.fail_marker = "Jane Doe"
    faculty = await paid_faculty()
    event = await store.get_event(faculty["fdp_id"])

    with pytest.raises(HTTPException) as exc:
        await certificates.issue_certificate(faculty, event)

    assert exc.value.status_code == 502
    assert await store.get_certificate_by_faculty_id(faculty["id"]) is None
