"""Products blueprint - catalog of products and services used on invoice lines."""
from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app, Response
from typing import List, Union

from invoice_panel.api import get_api, load_records
from invoice_panel.exceptions import BusinessLogicError, NotFoundError
from invoice_panel.forms.panel_forms import ProductForm
from invoice_panel.middleware import require_login
from invoice_panel.models import Product

products_bp = Blueprint('products', __name__, url_prefix='/products')


def _load_products() -> List[Product]:
    response = get_api().products.get_all()
    if not response.success:
        flash(response.error or 'Impossible de charger les produits', 'danger')
    return load_records(response, Product.from_api)


def _get_product_or_404(product_id: str) -> Product:
    product = next((p for p in _load_products() if p.id == product_id), None)
    if product is None:
        raise NotFoundError('Produit introuvable')
    return product


@products_bp.route('/')
@require_login
def list_products() -> str:
    products = _load_products()
    return render_template('products/list.html', products=products)


@products_bp.route('/new', methods=['GET', 'POST'])
@require_login
def create_product() -> Union[str, Response, tuple]:
    """Create a product; the price must be a non-negative number."""
    form = ProductForm()
    if request.method == 'POST':
        if not form.validate_on_submit():
            return render_template('products/form.html', form=form, product=None, action='new'), 400

        response = get_api().products.create(form.to_payload())
        if not response.success:
            current_app.logger.warning(f"Error creating product: {response.error}")
            raise BusinessLogicError(response.error or 'Impossible de créer le produit.')

        flash('Produit créé avec succès.', 'success')
        return redirect(url_for('products.list_products'))

    return render_template('products/form.html', form=form, product=None, action='new')


@products_bp.route('/<product_id>/edit', methods=['GET', 'POST'])
@require_login
def edit_product(product_id: str) -> Union[str, Response, tuple]:
    product = _get_product_or_404(product_id)
    form = ProductForm(obj=product)

    if request.method == 'POST':
        if not form.validate_on_submit():
            return render_template('products/form.html', form=form, product=product, action='edit'), 400

        response = get_api().products.update(product_id, form.to_payload())
        if not response.success:
            current_app.logger.warning(f"Error updating product {product_id}: {response.error}")
            raise BusinessLogicError(response.error or 'Impossible de modifier le produit.')

        flash('Produit modifié avec succès.', 'success')
        return redirect(url_for('products.list_products'))

    return render_template('products/form.html', form=form, product=product, action='edit')


@products_bp.route('/<product_id>/delete', methods=['POST'])
@require_login
def delete_product(product_id: str) -> Response:
    response = get_api().products.delete(product_id)
    if not response.success:
        raise BusinessLogicError(response.error or 'Impossible de supprimer le produit')

    flash('Produit supprimé', 'success')
    return redirect(url_for('products.list_products'))
