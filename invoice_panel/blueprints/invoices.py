"""Invoices blueprint - invoice list, detail, exports and the invoice draft editor."""
from flask import (
    Blueprint, render_template, request, redirect, url_for, flash, current_app,
    abort, make_response, send_file
)
from datetime import date
from io import BytesIO
from typing import List, Tuple

import requests

from invoice_panel.api import CONNECTION_ERROR, get_api, load_records
from invoice_panel.database import get_session
from invoice_panel.exceptions import NotFoundError, BusinessLogicError, GatewayError
from invoice_panel.middleware import require_login
from invoice_panel.models import Client, Invoice, Product
from invoice_panel.services.dashboard_service import filter_invoices, summarize_invoices
from invoice_panel.services.export_service import invoices_to_csv
from invoice_panel.services.invoice_draft_service import (
    get_invoice_draft, save_invoice_draft, clear_invoice_draft,
    update_draft_header, load_store, store_items, line_edits, apply_row_edit,
    apply_line_edits, ROW_FIELDS
)
from invoice_panel.services.line_item_store import LineItemStore
from invoice_panel.services.invoice_pdf_service import render_invoice_pdf
from invoice_panel.services.invoice_status_service import next_status, status_label
from invoice_panel.services.settings_service import get_setting, get_settings
from invoice_panel.services.submission_service import submit_invoice
from invoice_panel.services.totals_service import calculate_totals

invoices_bp = Blueprint('invoices', __name__, url_prefix='/invoices')


def _load_invoices() -> List[Invoice]:
    response = get_api().invoices.get_all()
    if not response.success:
        flash(response.error or 'Impossible de charger les factures', 'danger')
    return load_records(response, Invoice.from_api)


def _get_invoice_or_404(invoice_id: str) -> Invoice:
    response = get_api().invoices.get_by_id(invoice_id)
    if response.error == CONNECTION_ERROR:
        raise GatewayError()
    if not response.success or not isinstance(response.data, dict):
        raise NotFoundError(response.error or 'Facture introuvable')
    return Invoice.from_api(response.data)


def _load_editor_data() -> Tuple[List[Client], List[Product]]:
    """Clients and catalog for the editor. A failed load leaves the list empty."""
    api = get_api()
    clients_res = api.clients.get_all()
    products_res = api.products.get_all()
    if not clients_res.success:
        flash(clients_res.error or 'Impossible de charger les clients', 'warning')
    if not products_res.success:
        flash(products_res.error or 'Impossible de charger les produits', 'warning')
    return load_records(clients_res, Client.from_api), load_records(products_res, Product.from_api)


def _load_catalog() -> List[Product]:
    response = get_api().products.get_all()
    if not response.success:
        flash(response.error or 'Impossible de charger les produits', 'warning')
    return load_records(response, Product.from_api)


def _current_draft() -> dict:
    settings = get_settings(get_session())
    return get_invoice_draft(default_tax_rate=settings['default_tax_rate'])


def _apply_editor_form(with_catalog: bool = False) -> Tuple[dict, LineItemStore]:
    """
    Pull every edit of the editor page into the draft.

    All editor buttons submit the same form, so header fields and each
    rendered line are saved whichever action the user picked.
    """
    draft = update_draft_header(_current_draft(), request.form)
    edits = line_edits(request.form)
    store = load_store(draft, _load_catalog() if with_catalog or edits else None)
    apply_line_edits(store, edits)
    return draft, store


def _filtered_list_args() -> Tuple[str, str]:
    return request.args.get('q', '').strip(), request.args.get('status', 'all').strip() or 'all'


@invoices_bp.route('/')
@require_login
def list_invoices():
    """List invoices with search by number/client and status filter."""
    search_query, status = _filtered_list_args()
    invoices = _load_invoices()
    filtered = filter_invoices(invoices, search_query, status)

    is_htmx = request.headers.get('HX-Request') == 'true'
    template = 'invoices/_list_table.html' if is_htmx else 'invoices/list.html'

    return render_template(template,
                           invoices=filtered,
                           summary=summarize_invoices(filtered),
                           has_any=bool(invoices),
                           search_query=search_query,
                           selected_status=status)


@invoices_bp.route('/export.csv')
@require_login
def export_csv():
    """Export the currently filtered invoice list as CSV."""
    search_query, status = _filtered_list_args()
    invoices = filter_invoices(_load_invoices(), search_query, status)

    response = make_response(invoices_to_csv(invoices))
    response.headers['Content-Type'] = 'text/csv; charset=utf-8'
    response.headers['Content-Disposition'] = f'attachment; filename=factures_{date.today().isoformat()}.csv'
    return response


@invoices_bp.route('/<invoice_id>')
@require_login
def view_invoice(invoice_id):
    invoice = _get_invoice_or_404(invoice_id)
    return render_template('invoices/detail.html', invoice=invoice)


@invoices_bp.route('/<invoice_id>/pdf')
@require_login
def download_pdf(invoice_id):
    """Proxy the PDF generated by the backend."""
    filename = request.args.get('number') or invoice_id
    try:
        content = get_api().invoices.download_pdf(invoice_id)
    except requests.RequestException:
        flash('Impossible de télécharger la facture', 'danger')
        return redirect(request.referrer or url_for('invoices.list_invoices'))

    return send_file(BytesIO(content), mimetype='application/pdf',
                     as_attachment=True, download_name=f'{filename}.pdf')


@invoices_bp.route('/<invoice_id>/print')
@require_login
def print_invoice(invoice_id):
    """Render a printable PDF locally, with the footer configured in the panel settings."""
    invoice = _get_invoice_or_404(invoice_id)
    config = current_app.config

    business_info = {
        'name': config.get('BUSINESS_NAME'),
        'address': config.get('BUSINESS_ADDRESS'),
        'phone': config.get('BUSINESS_PHONE'),
        'email': config.get('BUSINESS_EMAIL'),
        'currency': config.get('CURRENCY_LABEL', ''),
        'footer_text': get_setting(get_session(), 'footer_text'),
    }
    pdf = render_invoice_pdf(invoice, business_info)
    return send_file(pdf, mimetype='application/pdf', as_attachment=False,
                     download_name=f'{invoice.invoice_number or invoice_id}.pdf')


@invoices_bp.route('/<invoice_id>/status', methods=['POST'])
@require_login
def advance_status(invoice_id):
    """Move an invoice to the next status (draft -> sent -> paid -> draft)."""
    invoice = _get_invoice_or_404(invoice_id)
    target = next_status(invoice.status)

    response = get_api().invoices.update_status(invoice_id, target.value)
    if response.success:
        current_app.logger.info(f"[INVOICE] {invoice.invoice_number}: {invoice.status} -> {target.value}")
        flash(f'La facture est maintenant : {status_label(target)}', 'success')
    else:
        flash(response.error or 'Impossible de changer le statut', 'danger')

    return redirect(request.referrer or url_for('invoices.list_invoices'))


# ---------------------------------------------------------------------------
# Invoice draft editor
# ---------------------------------------------------------------------------

@invoices_bp.route('/new', methods=['GET'])
@require_login
def new_invoice():
    """Draft editor: client, dates, tax rate, lines and live totals."""
    clients, products = _load_editor_data()
    draft = _current_draft()
    store = load_store(draft, products)
    totals = calculate_totals(store, draft.get('tax_rate'))

    return render_template('invoices/new.html',
                           clients=clients,
                           products=products,
                           draft=draft,
                           items=store.items,
                           totals=totals)


@invoices_bp.route('/draft/header', methods=['POST'])
@require_login
def update_header():
    """Update draft header fields (client, dates, tax rate, notes) and any edited lines."""
    draft, store = _apply_editor_form()
    save_invoice_draft(store_items(draft, store))

    if request.headers.get('HX-Request'):
        return '', 204
    return redirect(url_for('invoices.new_invoice'))


@invoices_bp.route('/draft/add-item', methods=['POST'])
@require_login
def add_item():
    """Append a line seeded from the chosen product (first catalog product by default)."""
    draft, store = _apply_editor_form(with_catalog=True)

    product = store.find_product(request.form.get('new_product_id', ''))
    if store.add_item(product) is None:
        flash(store.last_warning, 'warning')

    save_invoice_draft(store_items(draft, store))
    return redirect(url_for('invoices.new_invoice'))


@invoices_bp.route('/draft/items/<int:index>/update', methods=['POST'])
@require_login
def update_item(index):
    """
    Apply the edits of one rendered line.

    Accepts either a single `field`/`value` pair or the whole row, with bare
    or `items-<index>-` prefixed field names.
    """
    draft, store = _apply_editor_form(with_catalog=True)
    if not 0 <= index < len(store):
        abort(404)

    form = request.form
    if 'field' in form:
        store.update_item(index, form['field'], form.get('value'))
    else:
        apply_row_edit(store, index, {field: form[field] for field in ROW_FIELDS if field in form})

    save_invoice_draft(store_items(draft, store))
    return redirect(url_for('invoices.new_invoice'))


@invoices_bp.route('/draft/items/<int:index>/remove', methods=['POST'])
@require_login
def remove_item(index):
    draft, store = _apply_editor_form()
    if not 0 <= index < len(store):
        abort(404)

    store.remove_item(index)
    save_invoice_draft(store_items(draft, store))
    return redirect(url_for('invoices.new_invoice'))


@invoices_bp.route('/draft/cancel', methods=['POST'])
@require_login
def cancel_draft():
    """Discard the draft without sending anything."""
    clear_invoice_draft()
    return redirect(url_for('dashboard.index'))


@invoices_bp.route('/create', methods=['POST'])
@require_login
def create_invoice():
    """Validate the draft and send it to the backend once."""
    draft, store = _apply_editor_form()
    save_invoice_draft(store_items(draft, store))

    try:
        response = submit_invoice(draft, get_api().invoices)
    except BusinessLogicError as e:
        flash(e.message, 'danger')
        return redirect(url_for('invoices.new_invoice'))

    if not response.success:
        # Draft stays in the session so the user can retry
        flash(response.error or 'Impossible de créer la facture', 'danger')
        return redirect(url_for('invoices.new_invoice'))

    clear_invoice_draft()
    flash('Facture créée avec succès', 'success')
    return redirect(url_for('dashboard.index'))
