"""
Certificate Service
Fill HTML certificate templates and print them to PDF with headless Chromium
"""

import logging
import re
import time
from datetime import datetime, timezone
from html import escape
from typing import Optional

from fastapi import HTTPException, status
from playwright.async_api import async_playwright

from fdp_portal.config import Settings
from fdp_portal.services.entity_store import EntityStore
from fdp_portal.services.storage_service import StorageService

logger = logging.getLogger(__name__)

# Placeholders template authors may use, written as {{token}}
CERTIFICATE_TOKENS = (
    "participant_name",
    "fdp_title",
    "start_date",
    "end_date",
    "fdp_dates",
    "certificate_id",
    "issue_date",
    "college_name",
    "organiser_logo",
    "college_logo",
    "signature_image",
)

TOKEN_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")

DATE_FORMAT = "%b %d, %Y"

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


def format_certificate_date(value: Optional[datetime]) -> str:
    """Jan 05, 2025"""
    if value is None:
        return ""
    return value.strftime(DATE_FORMAT)


def generate_certificate_id(entity_id: str, now: Optional[datetime] = None) -> str:
    """CERT-<unix millis>-<first 8 chars of the entity id, upper-cased>"""
    if now is None:
        millis = int(time.time() * 1000)
    else:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        millis = int(now.timestamp() * 1000)
    return f"CERT-{millis}-{str(entity_id)[:8].upper()}"


def format_fdp_dates(start: Optional[datetime], end: Optional[datetime]) -> str:
    start_text = format_certificate_date(start)
    end_text = format_certificate_date(end)
    if not end_text or start_text == end_text:
        return start_text
    return f"{start_text} - {end_text}"


def render_template(template_html: str, data: dict) -> str:
    """
    Substitute every {{token}} in the template

    Tokens without a value, known or not, become an empty string so
    nothing is ever left literal in the printed certificate.
    """
    def _replace(match):
        value = data.get(match.group(1))
        return escape(str(value)) if value not in (None, "") else ""

    return TOKEN_RE.sub(_replace, template_html)


class PlaywrightPdfEngine:
    """Prints HTML to an A4 landscape PDF"""

    async def html_to_pdf(self, html: str) -> bytes:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True, args=CHROMIUM_ARGS)
            try:
                page = await browser.new_page()
                await page.set_content(html, wait_until="networkidle")
                return await page.pdf(
                    format="A4",
                    landscape=True,
                    print_background=True,
                    margin={"top": "0", "right": "0", "bottom": "0", "left": "0"},
                )
            finally:
                await browser.close()


class CertificateService:
    """Issues at most one certificate per faculty registration"""

    def __init__(self, store: EntityStore, storage: StorageService, engine, settings: Settings):
        self.store = store
        self.storage = storage
        self.engine = engine
        self.settings = settings

    def _absolute_url(self, url: Optional[str]) -> Optional[str]:
        # Chromium renders from about:blank, so local paths need the API host
        if url and url.startswith("/"):
            return f"{self.settings.API_URL.rstrip('/')}{url}"
        return url

    async def resolve_template(self) -> tuple:
        """Default template row if one exists, otherwise the built-in one"""
        template = await self.store.get_default_certificate_template()
        if template:
            return template["html_template"], template
        return DEFAULT_CERTIFICATE_TEMPLATE, None

    def build_certificate_data(
        self,
        faculty: dict,
        event: dict,
        certificate_id: str,
        issued_at: datetime,
        college: Optional[dict] = None,
        template: Optional[dict] = None
    ) -> dict:
        template = template or {}
        return {
            "participant_name": faculty["name"],
            "fdp_title": event["title"],
            "start_date": format_certificate_date(event.get("start_date")),
            "end_date": format_certificate_date(event.get("end_date")),
            "fdp_dates": format_fdp_dates(event.get("start_date"), event.get("end_date")),
            "certificate_id": certificate_id,
            "issue_date": format_certificate_date(issued_at),
            "college_name": (college or {}).get("college_name") or faculty.get("institution"),
            "organiser_logo": self._absolute_url(template.get("organiser_logo")),
            "college_logo": self._absolute_url((college or {}).get("logo_url")),
            "signature_image": self._absolute_url(template.get("signature_image")),
        }

    async def render(self, template_html: str, data: dict) -> bytes:
        """
        Fill the template and print it

        Raises:
            HTTPException: 502 if the rendering engine fails
        """
        html = render_template(template_html, data)
        try:
            return await self.engine.html_to_pdf(html)
        except Exception as e:
            logger.exception(f"Certificate render failed for {data.get('certificate_id')}")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Certificate rendering failed: {e}"
            )

    async def issue_certificate(self, faculty: dict, event: dict) -> dict:
        """
        Render, store and record a certificate for one registration

        Raises:
            HTTPException: 409 if the registration already has a certificate,
                502 if rendering fails
        """
        existing = await self.store.get_certificate_by_faculty_id(faculty["id"])
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Certificate already generated for this registration"
            )

        college = None
        if faculty.get("host_college_id"):
            college = await self.store.get_host_college(faculty["host_college_id"])

        issued_at = datetime.utcnow()
        certificate_id = generate_certificate_id(faculty["id"], issued_at)
        template_html, template = await self.resolve_template()
        data = self.build_certificate_data(faculty, event, certificate_id, issued_at, college, template)

        pdf_bytes = await self.render(template_html, data)

        relative_path = f"certificates/{certificate_id}.pdf"
        certificate_url = self.storage.save_bytes(relative_path, pdf_bytes)

        try:
            certificate = await self.store.create_certificate({
                "faculty_id": faculty["id"],
                "fdp_id": event["id"],
                "certificate_id": certificate_id,
                "certificate_url": certificate_url,
                "participant_name": data["participant_name"],
                "college_name": data["college_name"],
                "fdp_title": data["fdp_title"],
                "fdp_dates": data["fdp_dates"],
                "organiser_logo": data["organiser_logo"],
                "college_logo": data["college_logo"],
                "signature_image": data["signature_image"],
                "generated_at": issued_at,
            })
        except Exception:
            # Orphaned PDF from a lost race on the unique faculty_id
            self.storage.delete(relative_path)
            raise

        await self.store.update_faculty_registration(faculty["id"], {
            "certificate_generated": True,
            "certificate_url": certificate_url,
        })

        logger.info(f"Certificate {certificate_id} issued to faculty {faculty['id']}")
        return certificate


DEFAULT_CERTIFICATE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>Certificate of Completion</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: 'Georgia', 'Times New Roman', serif;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      width: 297mm;
      height: 210mm;
      display: flex;
      align-items: center;
      justify-content: center;
      padding: 18mm;
    }
    img[src=""] { display: none; }
    .certificate {
      background: white;
      width: 100%;
      height: 100%;
      padding: 36px 56px;
      border: 14px solid #667eea;
      border-radius: 10px;
      position: relative;
      display: flex;
      flex-direction: column;
      justify-content: space-between;
    }
    .certificate::before {
      content: '';
      position: absolute;
      top: 22px; left: 22px; right: 22px; bottom: 22px;
      border: 2px solid #764ba2;
      border-radius: 5px;
    }
    .logos { display: flex; justify-content: space-between; align-items: center; height: 64px; }
    .logos img { max-height: 64px; max-width: 180px; }
    .header { text-align: center; position: relative; z-index: 1; }
    .certificate-title {
      font-size: 40px;
      font-weight: bold;
      color: #667eea;
      text-transform: uppercase;
      letter-spacing: 4px;
      margin-bottom: 14px;
    }
    .subtitle { font-size: 20px; color: #555; font-style: italic; }
    .content { text-align: center; position: relative; z-index: 1; }
    .recipient-name {
      font-size: 44px;
      font-weight: bold;
      color: #333;
      border-bottom: 3px solid #764ba2;
      display: inline-block;
      padding-bottom: 8px;
      margin-bottom: 18px;
    }
    .college { font-size: 18px; color: #555; margin-bottom: 18px; }
    .description { font-size: 18px; color: #555; margin-bottom: 12px; }
    .fdp-title { font-size: 24px; font-weight: bold; color: #667eea; margin-bottom: 10px; }
    .dates { font-size: 16px; color: #666; }
    .footer {
      display: flex;
      justify-content: space-between;
      align-items: flex-end;
      position: relative;
      z-index: 1;
    }
    .signature-section { text-align: center; flex: 1; }
    .signature-section img { max-height: 48px; display: block; margin: 0 auto 4px; }
    .signature-line { border-top: 2px solid #333; width: 200px; margin: 0 auto 8px; }
    .signature-title { font-size: 14px; color: #666; font-weight: bold; }
    .signature-name { font-size: 12px; color: #888; }
    .certificate-id { font-size: 11px; color: #999; text-align: center; margin-top: 12px; }
  </style>
</head>
<body>
  <div class="certificate">
    <div class="logos">
      <img src="{{organiser_logo}}" alt="">
      <img src="{{college_logo}}" alt="">
    </div>

    <div class="header">
      <div class="certificate-title">Certificate of Completion</div>
      <div class="subtitle">This is to certify that</div>
    </div>

    <div class="content">
      <div class="recipient-name">{{participant_name}}</div>
      <div class="college">{{college_name}}</div>
      <div class="description">has successfully completed the Faculty Development Program</div>
      <div class="fdp-title">{{fdp_title}}</div>
      <div class="dates">Conducted from {{start_date}} to {{end_date}}</div>
    </div>

    <div class="footer">
      <div class="signature-section">
        <img src="{{signature_image}}" alt="">
        <div class="signature-line"></div>
        <div class="signature-title">Program Director</div>
      </div>
      <div class="signature-section">
        <div class="signature-line"></div>
        <div class="signature-title">Issue Date</div>
        <div class="signature-name">{{issue_date}}</div>
      </div>
    </div>

    <div class="certificate-id">Certificate ID: {{certificate_id}}</div>
  </div>
</body>
</html>
"""
