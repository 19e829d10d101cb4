"""User dashboard blueprint."""
from flask import Blueprint, render_template, flash

from invoice_panel.api import get_api, load_records
from invoice_panel.middleware import require_login
from invoice_panel.models import Client, Invoice, Product
from invoice_panel.services.dashboard_service import get_dashboard_stats

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')

RECENT_INVOICES = 5


@dashboard_bp.route('/')
@require_login
def index():
    """Dashboard with KPIs and the latest invoices."""
    api = get_api()

    invoices_res = api.invoices.get_all()
    if not invoices_res.success:
        flash(invoices_res.error or 'Impossible de charger les factures', 'danger')

    clients = load_records(api.clients.get_all(), Client.from_api)
    products = load_records(api.products.get_all(), Product.from_api)
    invoices = load_records(invoices_res, Invoice.from_api)

    stats = get_dashboard_stats(clients, products, invoices)
    recent = sorted(invoices, key=lambda inv: inv.issue_date or '', reverse=True)[:RECENT_INVOICES]

    return render_template('dashboard/index.html', stats=stats, recent_invoices=recent)
