from datetime import datetime

from quotify_api.rendering.preview import (
    build_preview_context,
    document_title,
    format_address,
    is_light_background,
    render_quotation_html,
)
from quotify_api.schemas.template import TemplateData


def _quotation(**data):
    doc = {
        "customer": "Ravi Traders",
        "quotation_data": [{"product_name": "Lamp", "quantity": 3, "per_item_price": 100}],
        "total_amount": 354.0,
    }
    doc.update(data)
    return {"quote_number": "QT-7", "quotation_data": doc, "created_at": datetime(2024, 1, 15, 9, 30)}


def _context(quotation=None, template=None, organization=None):
    return build_preview_context(
        quotation=quotation or _quotation(),
        template_data=template or TemplateData(),
        organization=organization,
        tax_rate=0.18,
        validity_days=30,
        currency="₹",
        today=datetime(2024, 2, 1),
    )


def test_brightness_threshold():
    assert is_light_background("#ffffff")
    assert is_light_background("#fff")
    assert not is_light_background("#000000")
    assert not is_light_background("#3b82f6")
    assert is_light_background("#fbbf24")


def test_address_order_skips_blanks():
    address = {"street": "1 Main St", "city": "Pune", "state": "", "postalCode": "411001", "country": "India"}
    assert format_address(address) == "1 Main St, Pune, India, 411001"
    assert format_address("Plot 9, Sector 5") == "Plot 9, Sector 5"
    assert format_address(None) == ""


def test_document_title():
    assert document_title("QT-7", datetime(2024, 2, 1)) == "Quotation_QT-7_01-02-2024"
    assert document_title(None, datetime(2024, 2, 1)) == "Quotation_Unknown_01-02-2024"


def test_totals_and_dates():
    ctx = _context()
    assert ctx["subtotal"] == 300
    assert round(ctx["tax_amount"], 2) == 54
    assert ctx["grand_total"] == 354.0
    assert ctx["created_on"] == "15/01/2024"
    assert ctx["valid_until"] == "14/02/2024"
    assert ctx["items"][0]["subtotal"] == 300


def test_grand_total_falls_back_to_subtotal():
    quotation = _quotation()
    del quotation["quotation_data"]["total_amount"]
    assert _context(quotation)["grand_total"] == 300


def test_header_colours_and_sizes():
    template = TemplateData.model_validate(
        {
            "primaryColor": "#1e3a8a",
            "header": {"backgroundColor": "#f8fafc"},
            "table": {"borderStyle": "heavy"},
            "typography": {"fontSize": "small"},
        }
    )
    ctx = _context(template=template)
    assert ctx["header_bg"] == "#f8fafc"
    assert ctx["header_text"] == "#111827"
    assert ctx["table_header_text"] == "#ffffff"
    assert ctx["border_width"] == 3
    assert ctx["base_font_size"] == "14px"


def test_toggles_hide_sections():
    template = TemplateData.model_validate(
        {
            "sections": {"showNotes": False, "showSignature": False},
            "totals": {"showTaxBreakdown": False},
            "advanced": {"showWatermark": True},
        }
    )
    html = render_quotation_html(
        quotation=_quotation(),
        template_data=template,
        organization={"name": "Acme", "org_data": {}},
        tax_rate=0.18,
        validity_days=30,
        currency="₹",
    )
    assert "Thank you for your business!" not in html
    assert "Authorized Signature" not in html
    assert "GST (18%)" not in html
    assert 'class="watermark">DRAFT<' in html
    assert "Lamp" in html


def test_customer_text_is_escaped():
    html = render_quotation_html(
        quotation=_quotation(customer="<script>alert(1)</script>"),
        template_data=TemplateData(),
        organization=None,
        tax_rate=0.18,
        validity_days=30,
        currency="₹",
    )
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html
