"""
Printable quotation preview.

Renders a saved quotation with its organization's template settings into a
self-contained HTML page. PDF export is the browser's print dialog.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
import logging

from jinja2 import Environment, select_autoescape

from quotify_api.schemas.template import TemplateData

logger = logging.getLogger(__name__)

FONT_SIZES = {"small": "14px", "medium": "16px", "large": "18px"}
BORDER_WIDTHS = {"none": 0, "light": 1, "medium": 2, "heavy": 3}
LOGO_ALIGNMENT = {"left": "flex-start", "center": "center", "right": "flex-end"}


def is_light_background(color: Optional[str]) -> bool:
    """Perceived-brightness test used to pick dark or white text on a colour."""
    hex_ = (color or "").lstrip("#")
    if len(hex_) == 3:
        hex_ = "".join(c * 2 for c in hex_)
    try:
        r, g, b = int(hex_[0:2], 16), int(hex_[2:4], 16), int(hex_[4:6], 16)
    except ValueError:
        return True
    brightness = (r * 299 + g * 587 + b * 114) / 1000
    return brightness > 155


def format_address(address: Any) -> str:
    if not address:
        return ""
    if isinstance(address, str):
        return address
    parts = [
        address.get(key)
        for key in ("street", "city", "state", "country", "postalCode")
        if address.get(key)
    ]
    return ", ".join(parts)


def format_date(value: datetime) -> str:
    return value.strftime("%d/%m/%Y")


def document_title(quote_number: Optional[str], today: Optional[datetime] = None) -> str:
    today = today or datetime.now(timezone.utc)
    return f"Quotation_{quote_number or 'Unknown'}_{today.strftime('%d-%m-%Y')}"


def as_number(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def compute_lines(lines: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    out = []
    for line in lines or []:
        if not isinstance(line, dict):
            continue
        quantity = as_number(line.get("quantity"))
        price = as_number(line.get("per_item_price"))
        out.append({**line, "quantity": quantity, "per_item_price": price, "subtotal": quantity * price})
    return out


def build_preview_context(
    *,
    quotation: Dict[str, Any],
    template_data: TemplateData,
    organization: Optional[Dict[str, Any]],
    tax_rate: float,
    validity_days: int,
    currency: str,
    today: Optional[datetime] = None,
) -> Dict[str, Any]:
    data = quotation.get("quotation_data") or {}
    org = organization or {}
    org_data = org.get("org_data") or {}

    items = compute_lines(data.get("quotation_data") or [])
    subtotal = sum(item["subtotal"] for item in items)
    tax_amount = subtotal * tax_rate
    stored_total = data.get("total_amount")
    grand_total = as_number(stored_total, subtotal) if stored_total is not None else subtotal

    created_at: datetime = quotation["created_at"]
    valid_until = created_at + timedelta(days=validity_days)

    t = template_data
    header_bg = t.header.backgroundColor or t.primaryColor
    table_header_bg = t.table.headerBgColor or t.secondaryColor
    border_width = BORDER_WIDTHS.get(t.table.borderStyle, 2)

    return {
        "t": t,
        "title": document_title(quotation.get("quote_number"), today),
        "quote_number": quotation.get("quote_number"),
        "customer": data.get("customer") or "",
        "items": items,
        "subtotal": subtotal,
        "tax_amount": tax_amount,
        "tax_label": t.content.taxLabel or f"GST ({tax_rate * 100:.0f}%)",
        "grand_total": grand_total,
        "currency": currency,
        "created_on": format_date(created_at),
        "valid_until": format_date(valid_until),
        "org_name": org.get("name") or org_data.get("companyName") or "Company Name",
        "org_logo": org_data.get("logo"),
        "org_address": format_address(org_data.get("address")),
        "org_phone": org_data.get("phone"),
        "org_email": org_data.get("email"),
        "org_website": org_data.get("website"),
        "org_gst": (org_data.get("tax") or {}).get("gst") or org_data.get("gst"),
        "header_bg": header_bg,
        "header_text": "#111827" if is_light_background(header_bg) else "#ffffff",
        "table_header_bg": table_header_bg,
        "table_header_text": "#000000" if is_light_background(table_header_bg) else "#ffffff",
        "border_width": border_width,
        "base_font_size": FONT_SIZES.get(t.typography.fontSize, "16px"),
        "totals_font_size": FONT_SIZES.get(t.typography.totalsSize, "16px"),
        "grand_total_font_size": FONT_SIZES.get(t.typography.grandTotalSize, "18px"),
        "font_family": "inherit" if t.typography.fontFamily == "default" else t.typography.fontFamily,
        "logo_alignment": LOGO_ALIGNMENT.get(t.logoPosition, "flex-start"),
        "footer_text": t.content.footerText or t.footerText,
    }


_env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))
_env.filters["money"] = lambda value: f"{float(value or 0):,.2f}"
_env.filters["qty"] = lambda value: f"{float(value):g}"


PREVIEW_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ title }}</title>
<style>
  @page { size: {{ t.pageSize }}; margin: 10mm; }
  body { margin: 0; background: #f9fafb; font-size: {{ base_font_size }}; font-family: {{ font_family }}, Arial, sans-serif; color: #000; }
  .actions { max-width: 56rem; margin: 2rem auto 1.5rem; display: flex; justify-content: flex-end; gap: .75rem; }
  .actions button { border: 1px solid #d1d5db; border-radius: .5rem; padding: .5rem 1rem; cursor: pointer; background: #fff; }
  .actions .primary { background: {{ t.primaryColor }}; color: #fff; border-color: {{ t.primaryColor }}; }
  #quotation-content { position: relative; max-width: 56rem; margin: 0 auto 2rem; background: #fff; padding: {{ t.advanced.pageMargin }}px; box-shadow: 0 10px 15px rgba(0,0,0,.1); border-radius: .5rem; overflow: hidden; }
  .section { margin-bottom: {{ t.advanced.sectionSpacing }}px; padding: 0 2rem; }
  .header { padding: 2rem; background: {{ header_bg }}; color: {{ header_text }}; margin-bottom: {{ t.advanced.sectionSpacing }}px;{% if t.header.showBorder %} border-bottom: 4px solid {{ t.primaryColor }};{% endif %} }
  .header-inner { display: flex; align-items: flex-start; justify-content: space-between; }
  .header-inner.centered { flex-direction: column; align-items: center; text-align: center; }
  .meta { text-align: right; }
  .centered .meta { text-align: center; }
  .header p { margin: .15rem 0; font-size: .875rem; opacity: .9; }
  .logo { height: {{ t.header.logoSize }}px; background: #fff; border-radius: .25rem; padding: .5rem; margin-bottom: 1rem; }
  table { width: 100%; border-collapse: collapse; }
  thead tr { background: {{ table_header_bg }}; color: {{ table_header_text }}; border-bottom: {{ border_width }}px solid {{ t.secondaryColor }}; }
  th, td { padding: .75rem .5rem; }
  th { font-weight: 600; }
  .num { text-align: right; }
  .center { text-align: center; }
  {% if t.table.rowBorders %}tbody tr { border-bottom: 1px solid #e5e7eb; }{% endif %}
  {% if t.table.alternateRowColor %}tbody tr.alt { background: {{ t.secondaryColor }}15; }{% endif %}
  .totals { margin-top: 2rem; {% if t.totals.position == 'right' %}display: flex; justify-content: flex-end;{% endif %} }
  .totals-box { width: {% if t.totals.position == 'right' %}20rem{% else %}100%{% endif %}; font-size: {{ totals_font_size }}; }
  .totals-row { display: flex; justify-content: space-between; padding: .5rem 0; border-bottom: 1px solid #e5e7eb; }
  .grand { font-weight: 700; padding: .75rem 0; border-top: {{ border_width }}px solid {{ t.secondaryColor }}; font-size: {{ grand_total_font_size }}; display: flex; justify-content: space-between; }
  .grand .amount { color: {{ t.primaryColor }}; }
  .customer { background: #f9fafb; border-radius: .5rem; padding: 1rem; }
  .customer .label, .notes h3 { color: {{ t.secondaryColor }}; font-weight: 600; font-size: .875rem; margin: 0; }
  .customer .name { font-size: 1.125rem; font-weight: 600; margin: .25rem 0 0; }
  .notes { background: {{ t.secondaryColor }}10; border-radius: .5rem; padding: 1rem; }
  .terms { border-top: 1px solid #e5e7eb; padding-top: 1rem; white-space: pre-wrap; }
  .signature { display: flex; justify-content: flex-end; text-align: right; }
  .signature .line { width: 200px; border-top: 2px solid {{ t.secondaryColor }}; padding-top: .5rem; font-weight: 600; font-size: .875rem; }
  .watermark { position: absolute; inset: 0; display: flex; align-items: center; justify-content: center; pointer-events: none; font-size: 8rem; font-weight: 700; opacity: .05; transform: rotate(-45deg); color: {{ t.secondaryColor }}; }
  .footer { padding: 1rem; border-top: 1px solid #e5e7eb; text-align: center; font-size: .875rem; color: #4b5563; background: {{ t.secondaryColor }}08; }
  .page-number { text-align: center; font-size: .75rem; color: #6b7280; }
  @media print {
    body { background: #fff; print-color-adjust: exact; -webkit-print-color-adjust: exact; }
    .actions { display: none !important; }
    #quotation-content { box-shadow: none !important; border-radius: 0 !important; margin: 0; }
  }
</style>
</head>
<body>
<div class="actions">
  <button type="button" onclick="history.back()">Back</button>
  <button type="button" onclick="window.print()">Print</button>
  <button type="button" class="primary" onclick="window.print()">Download PDF</button>
</div>
<div id="quotation-content">
  {% if t.advanced.showWatermark and t.content.watermarkText %}<div class="watermark">{{ t.content.watermarkText }}</div>{% endif %}

  <div class="header">
    <div class="header-inner{% if t.logoPosition == 'center' %} centered{% endif %}" style="justify-content: {{ logo_alignment if t.logoPosition == 'center' else 'space-between' }};">
      <div>
        {% if t.sections.showLogo and org_logo %}<img class="logo" src="{{ org_logo }}" alt="Company Logo">{% endif %}
        {% if t.sections.showCompanyName %}<h1>{{ org_name }}</h1>{% endif %}
        {% if t.sections.showAddress and org_address %}<p>{{ org_address }}</p>{% endif %}
        {% if t.sections.showPhone and org_phone %}<p>Ph: {{ org_phone }}</p>{% endif %}
        {% if t.sections.showEmail and org_email %}<p>Email: {{ org_email }}</p>{% endif %}
        {% if t.sections.showWebsite and org_website %}<p>Web: {{ org_website }}</p>{% endif %}
        {% if t.sections.showGST and org_gst %}<p>GST: {{ org_gst }}</p>{% endif %}
      </div>
      <div class="meta">
        <h2>{{ t.headerText or "QUOTATION" }}</h2>
        {% if t.sections.showQuotationNumber %}<p>Quotation #: {{ quote_number }}</p>{% endif %}
        {% if t.sections.showDate %}<p>Date: {{ created_on }}</p>{% endif %}
        {% if t.sections.showValidUntil %}<p>Valid Until: {{ valid_until }}</p>{% endif %}
      </div>
    </div>
  </div>

  {% if t.sections.showCustomerSection %}
  <div class="section">
    <div class="customer">
      <p class="label">{{ t.content.customerSectionTitle or "Bill To" }}:</p>
      <p class="name">{{ customer }}</p>
    </div>
  </div>
  {% endif %}

  <div class="section">
    <table>
      {% if t.table.showHeader %}
      <thead>
        <tr>
          {% if t.table.showItemNumber %}<th style="text-align:left">#</th>{% endif %}
          {% if t.table.showDescription %}<th style="text-align:left">{{ t.content.itemColumnName }}</th>{% endif %}
          {% if t.table.showHSN %}<th class="center">HSN</th>{% endif %}
          {% if t.table.showQuantity %}<th class="center">{{ t.content.quantityColumnName }}</th>{% endif %}
          {% if t.table.showRate %}<th class="num">{{ t.content.rateColumnName }}</th>{% endif %}
          {% if t.table.showTax %}<th class="num">Tax %</th>{% endif %}
          {% if t.table.showDiscount %}<th class="num">Discount</th>{% endif %}
          {% if t.table.showAmount %}<th class="num">{{ t.content.totalColumnName }}</th>{% endif %}
        </tr>
      </thead>
      {% endif %}
      <tbody>
        {% for item in items %}
        <tr class="{{ 'alt' if loop.index0 % 2 == 1 else '' }}">
          {% if t.table.showItemNumber %}<td>{{ loop.index }}</td>{% endif %}
          {% if t.table.showDescription %}<td>{{ item.product_name }}</td>{% endif %}
          {% if t.table.showHSN %}<td class="center">-</td>{% endif %}
          {% if t.table.showQuantity %}<td class="center">{{ item.quantity|qty }}</td>{% endif %}
          {% if t.table.showRate %}<td class="num">{{ currency }}{{ item.per_item_price|money }}</td>{% endif %}
          {% if t.table.showTax %}<td class="num">-</td>{% endif %}
          {% if t.table.showDiscount %}<td class="num">-</td>{% endif %}
          {% if t.table.showAmount %}<td class="num"><strong>{{ currency }}{{ item.subtotal|money }}</strong></td>{% endif %}
        </tr>
        {% endfor %}
      </tbody>
    </table>

    <div class="totals">
      <div class="totals-box">
        {% if t.totals.showSubtotal %}<div class="totals-row"><span>{{ t.content.subtotalLabel }}:</span><strong>{{ currency }}{{ subtotal|money }}</strong></div>{% endif %}
        {% if t.totals.showTaxBreakdown %}<div class="totals-row"><span>{{ tax_label }}:</span><strong>{{ currency }}{{ tax_amount|money }}</strong></div>{% endif %}
        {% if t.totals.showDiscountRow %}<div class="totals-row"><span>Discount:</span><strong>{{ currency }}0.00</strong></div>{% endif %}
        {% if t.totals.showShipping %}<div class="totals-row"><span>Shipping:</span><strong>{{ currency }}0.00</strong></div>{% endif %}
        {% if t.totals.showGrandTotal %}<div class="grand"><span>{{ t.content.grandTotalLabel }}:</span><span class="amount">{{ currency }}{{ grand_total|money }}</span></div>{% endif %}
      </div>
    </div>
  </div>

  {% if t.sections.showNotes and t.content.notesContent %}
  <div class="section">
    <div class="notes">
      <h3>{{ t.content.notesTitle or "Notes" }}:</h3>
      <p>{{ t.content.notesContent }}</p>
    </div>
  </div>
  {% endif %}

  {% if t.sections.showTerms and t.content.termsContent %}
  <div class="section">
    <div class="terms">
      <h3>{{ t.content.termsTitle or "Terms & Conditions" }}:</h3>
      <p>{{ t.content.termsContent }}</p>
    </div>
  </div>
  {% endif %}

  {% if t.sections.showSignature %}
  <div class="section">
    <div class="signature">
      <div>
        <div class="line">{{ t.content.signatureLabel }}</div>
        {% if t.advanced.showSignatureDate %}<p>Date: {{ created_on }}</p>{% endif %}
      </div>
    </div>
  </div>
  {% endif %}

  {% if t.advanced.showFooter and footer_text %}<div class="footer">{{ footer_text }}</div>{% endif %}
  {% if t.advanced.showPageNumbers %}<div class="page-number">Page 1 of 1</div>{% endif %}
</div>
</body>
</html>
"""

MISSING_TEMPLATE_PAGE = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>Template Not Found</title></head>
<body style="font-family: Arial, sans-serif; background: #f9fafb; display: flex; align-items: center; justify-content: center; min-height: 100vh;">
  <div style="background: #fff; border-radius: .5rem; padding: 2rem; max-width: 28rem; text-align: center;">
    <h2>Template Not Found</h2>
    <p>No template is associated with this quotation.</p>
    <a href="/quotations">Go to Dashboard</a>
  </div>
</body>
</html>
"""

_preview = _env.from_string(PREVIEW_TEMPLATE)


def render_quotation_html(**kwargs: Any) -> str:
    context = build_preview_context(**kwargs)
    logger.debug("rendering preview %s", context["title"])
    return _preview.render(**context)
