"""
Document Service
Printable HTML documents for an order: invoice, shipping label, packing slip

Documents are returned as HTML fragments; the dashboard renders them in a
preview and prints/saves them client side.

Author: TM3
Date: 2026-10-17
"""
import logging
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from html import escape
from typing import Optional

from app.core.config import settings
from app.core.exceptions import UnsupportedDocumentError
from app.domain.fulfillment import DocumentType
from app.domain.order import Order, OrderItem

logger = logging.getLogger(__name__)

MARKETPLACE_NAME = 'Auto-Dukaan Marketplace'

SELLER = {
    'name': 'Seller Name',
    'store': 'Auto-Dukaan Seller',
    'street': '123 Seller Street',
    'city': 'Mumbai, Maharashtra',
    'country_pin': 'India - 400001',
    'gstin': '27AABCT1234Z1ZT',
    'phone': '+91 9XXXXXXXXX',
    'email': 'seller@example.com',
}

CELL = 'padding: 10px; border-bottom: 1px solid #ddd;'


def money(amount: Decimal) -> str:
    value = Decimal(amount).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return f"₹{value}"


def format_date(value: datetime) -> str:
    return value.strftime('%d/%m/%Y')


def _variant_line(item: OrderItem) -> str:
    if not item.variant:
        return ''
    return f'<br><span style="font-size: 12px; color: #666;">{escape(item.variant)}</span>'


class DocumentService:
    """Renders order documents as HTML"""

    def __init__(self, gst_rate: Optional[float] = None):
        rate = settings.GST_RATE if gst_rate is None else gst_rate
        self.gst_rate = Decimal(str(rate))

    def generate(self, document_type: DocumentType, order: Order, today: Optional[date] = None) -> str:
        """
        Render any supported document

        Raises:
            UnsupportedDocumentError: for document types without a template
        """
        if document_type == DocumentType.INVOICE:
            html = self.generate_invoice(order)
        elif document_type == DocumentType.SHIPPING_LABEL:
            html = self.generate_shipping_label(order, today=today)
        elif document_type == DocumentType.PACKING_SLIP:
            html = self.generate_packing_slip(order)
        else:
            raise UnsupportedDocumentError(document_type.value)

        logger.info(f"Generated {document_type.value} for order {order.id}")
        return html

    def invoice_totals(self, order: Order) -> dict:
        """
        Invoice breakdown

        GST is charged on the item subtotal; shipping is whatever the
        order total holds beyond subtotal and tax.
        """
        subtotal = order.subtotal
        tax_amount = subtotal * self.gst_rate
        shipping_cost = order.total_amount - subtotal - tax_amount
        return {
            'subtotal': subtotal,
            'tax_amount': tax_amount,
            'shipping_cost': shipping_cost,
            'total': order.total_amount,
        }

    def generate_invoice(self, order: Order) -> str:
        totals = self.invoice_totals(order)
        address = order.shipping_address
        gst_percent = int(self.gst_rate * 100)

        rows = ''.join(
            f"""
              <tr>
                <td style="{CELL}">
                  {escape(item.name)}
                  {_variant_line(item)}
                </td>
                <td style="{CELL} text-align: right;">{money(item.price)}</td>
                <td style="{CELL} text-align: right;">{item.quantity}</td>
                <td style="{CELL} text-align: right;">{money(item.line_total)}</td>
              </tr>"""
            for item in order.items
        )

        return f"""
      <div style="font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px;">
        <div style="display: flex; justify-content: space-between; margin-bottom: 30px;">
          <div>
            <h1 style="margin: 0;">INVOICE</h1>
            <p>{MARKETPLACE_NAME}</p>
          </div>
          <div style="text-align: right;">
            <h2 style="margin: 0; color: #666;">Invoice #INV-{escape(order.id)}</h2>
            <p style="margin: 5px 0;">Date: {format_date(order.created_at)}</p>
          </div>
        </div>

        <div style="display: flex; margin-bottom: 30px;">
          <div style="flex: 1;">
            <h3 style="margin: 0 0 10px 0;">Seller:</h3>
            <p style="margin: 0;">
              {SELLER['name']}<br>
              {SELLER['store']}<br>
              GSTIN: {SELLER['gstin']}<br>
              Phone: {SELLER['phone']}<br>
              Email: {SELLER['email']}
            </p>
          </div>

          <div style="flex: 1;">
            <h3 style="margin: 0 0 10px 0;">Bill To:</h3>
            <p style="margin: 0;">
              {escape(order.customer_name)}<br>
              {escape(address.street)}<br>
              {escape(address.city)}, {escape(address.state)} - {escape(address.pincode)}<br>
              Phone: {escape(order.customer_phone)}
            </p>
          </div>
        </div>

        <table style="width: 100%; border-collapse: collapse; margin-bottom: 30px;">
          <thead>
            <tr style="background-color: #f2f2f2;">
              <th style="{CELL} text-align: left;">Item</th>
              <th style="{CELL} text-align: right;">Price</th>
              <th style="{CELL} text-align: right;">Quantity</th>
              <th style="{CELL} text-align: right;">Total</th>
            </tr>
          </thead>
          <tbody>{rows}
          </tbody>
        </table>

        <div style="margin-left: auto; width: 300px;">
          <div style="display: flex; justify-content: space-between; margin-bottom: 10px;">
            <span>Subtotal:</span>
            <span>{money(totals['subtotal'])}</span>
          </div>
          <div style="display: flex; justify-content: space-between; margin-bottom: 10px;">
            <span>GST ({gst_percent}%):</span>
            <span>{money(totals['tax_amount'])}</span>
          </div>
          <div style="display: flex; justify-content: space-between; margin-bottom: 10px;">
            <span>Shipping:</span>
            <span>{money(totals['shipping_cost'])}</span>
          </div>
          <div style="display: flex; justify-content: space-between; padding-top: 10px; border-top: 1px solid #ddd; font-weight: bold;">
            <span>Total:</span>
            <span>{money(totals['total'])}</span>
          </div>
        </div>

        <div style="margin-top: 40px; text-align: center; color: #666; font-size: 12px;">
          <p>Thank you for your business!</p>
          <p>This is a computer-generated invoice and does not require a signature.</p>
        </div>
      </div>
    """

    def generate_shipping_label(self, order: Order, today: Optional[date] = None) -> str:
        today = today or datetime.now(timezone.utc).date()
        address = order.shipping_address

        tracking_line = ''
        if order.shipping_info and order.shipping_info.tracking_id:
            tracking_line = f'<p style="margin: 5px 0;">Tracking: {escape(order.shipping_info.tracking_id)}</p>'

        return f"""
      <div style="font-family: Arial, sans-serif; max-width: 400px; border: 2px solid #000; padding: 20px; margin: 0 auto;">
        <div style="text-align: center; border-bottom: 1px solid #000; padding-bottom: 10px; margin-bottom: 15px;">
          <h2 style="margin: 0;">SHIPPING LABEL</h2>
          <p style="margin: 5px 0;">{MARKETPLACE_NAME}</p>
        </div>

        <div style="display: flex; margin-bottom: 20px;">
          <div style="flex: 1;">
            <h3 style="margin: 0 0 5px 0; font-size: 12px;">FROM:</h3>
            <p style="margin: 0; font-size: 14px;">
              {SELLER['name']}<br>
              {SELLER['store']}<br>
              {SELLER['street']}<br>
              {SELLER['city']}<br>
              {SELLER['country_pin']}
            </p>
          </div>

          <div style="flex: 1;">
            <h3 style="margin: 0 0 5px 0; font-size: 12px;">TO:</h3>
            <p style="margin: 0; font-size: 14px;">
              {escape(address.name)}<br>
              {escape(address.street)}<br>
              {escape(address.city)}, {escape(address.state)}<br>
              India - {escape(address.pincode)}<br>
              Phone: {escape(address.phone)}
            </p>
          </div>
        </div>

        <div style="border: 1px solid #000; padding: 10px; text-align: center; margin-bottom: 15px;">
          <h1 style="margin: 0; font-size: 20px;">Order #{escape(order.id)}</h1>
          {tracking_line}
        </div>

        <div style="text-align: center;">
          <svg id="barcode"></svg>
          <p style="font-size: 12px; margin-top: 10px;">This shipping label was generated on {today.strftime('%d/%m/%Y')}</p>
        </div>
      </div>
    """

    def generate_packing_slip(self, order: Order) -> str:
        address = order.shipping_address

        rows = ''.join(
            f"""
              <tr>
                <td style="{CELL}">
                  {escape(item.name)}
                  {_variant_line(item)}
                </td>
                <td style="{CELL} text-align: right;">{item.quantity}</td>
                <td style="{CELL} text-align: center;">
                  <div style="width: 20px; height: 20px; border: 1px solid #000; margin: 0 auto;"></div>
                </td>
              </tr>"""
            for item in order.items
        )

        notes = escape(order.notes) if order.notes else 'No special instructions.'

        return f"""
      <div style="font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px;">
        <div style="text-align: center; margin-bottom: 30px;">
          <h1 style="margin: 0;">PACKING SLIP</h1>
          <p>Order #{escape(order.id)}</p>
          <p>Date: {format_date(order.created_at)}</p>
        </div>

        <div style="display: flex; margin-bottom: 30px;">
          <div style="flex: 1;">
            <h3 style="margin: 0 0 10px 0;">Ship To:</h3>
            <p style="margin: 0;">
              {escape(address.name)}<br>
              {escape(address.street)}<br>
              {escape(address.city)}, {escape(address.state)}<br>
              {escape(address.pincode)}<br>
              Phone: {escape(address.phone)}
            </p>
          </div>
        </div>

        <table style="width: 100%; border-collapse: collapse; margin-bottom: 30px;">
          <thead>
            <tr style="background-color: #f2f2f2;">
              <th style="{CELL} text-align: left;">Item</th>
              <th style="{CELL} text-align: right;">Quantity</th>
              <th style="{CELL} text-align: center;">Check</th>
            </tr>
          </thead>
          <tbody>{rows}
          </tbody>
        </table>

        <div style="border-top: 1px solid #ddd; padding-top: 20px;">
          <h3>Notes:</h3>
          <p>{notes}</p>
        </div>

        <div style="margin-top: 40px; text-align: center; font-size: 12px;">
          <p>This is a packing slip only. No price information is included.</p>
        </div>
      </div>
    """
