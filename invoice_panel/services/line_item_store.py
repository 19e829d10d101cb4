"""Line item store - ordered, editable invoice lines kept consistent with the catalog."""

from typing import Any, Iterable, List, Optional

from invoice_panel.models import LineItem, Product
from invoice_panel.models._fields import to_float, to_int

NO_PRODUCT_WARNING = "Veuillez d'abord créer des produits"


def coerce_quantity(value: Any) -> int:
    """Quantity from form input; unparseable text becomes 0."""
    return to_int(value, 0)


def coerce_unit_price(value: Any) -> float:
    """Unit price from form input; accepts a decimal comma, unparseable text becomes 0."""
    if isinstance(value, str):
        value = value.strip().replace(',', '.')
    return to_float(value)


class LineItemStore:
    """
    Ordered list of invoice lines.

    Insertion order is display order and the same product may appear on several
    lines. Every mutation leaves `line_total == quantity * unit_price` on the
    touched item. The store performs no I/O; the catalog is handed in already loaded.
    """

    def __init__(self, items: Optional[Iterable[LineItem]] = None, catalog: Optional[Iterable[Product]] = None):
        self.items: List[LineItem] = list(items or [])
        self.catalog: List[Product] = list(catalog or [])
        self.last_warning: Optional[str] = None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index: int) -> LineItem:
        return self.items[index]

    def find_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.catalog if p.id == str(product_id)), None)

    def add_item(self, default_product: Optional[Product] = None) -> Optional[LineItem]:
        """
        Append a line seeded from `default_product` (first catalog product by default).

        Returns None and sets `last_warning` when there is no product to seed from.
        """
        self.last_warning = None
        product = default_product or (self.catalog[0] if self.catalog else None)
        if product is None:
            self.last_warning = NO_PRODUCT_WARNING
            return None

        item = LineItem(
            product_id=product.id,
            product_name=product.name,
            quantity=1,
            unit_price=product.price,
        )
        item.recompute_total()
        self.items.append(item)
        return item

    def remove_item(self, index: int) -> LineItem:
        """Remove the line at `index`. Raises IndexError when out of range."""
        self._check_index(index)
        return self.items.pop(index)

    def update_item(self, index: int, field: str, value: Any) -> LineItem:
        """
        Change one field of the line at `index` and refresh derived values.

        A product id missing from the catalog leaves the line untouched.
        """
        self._check_index(index)
        item = self.items[index]

        if field == 'product_id':
            product = self.find_product(value)
            if product is not None:
                item.product_id = product.id
                item.product_name = product.name
                item.unit_price = product.price
                item.recompute_total()
        elif field == 'quantity':
            item.quantity = coerce_quantity(value)
            item.recompute_total()
        elif field == 'unit_price':
            item.unit_price = coerce_unit_price(value)
            item.recompute_total()
        elif hasattr(item, field) and field != 'line_total':
            setattr(item, field, value)

        return item

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            raise IndexError(f'Line index {index} out of range (0..{len(self.items) - 1})')

    def to_list(self) -> List[dict]:
        """Serialize lines for the Flask session."""
        return [
            {
                'product_id': item.product_id,
                'product_name': item.product_name,
                'quantity': item.quantity,
                'unit_price': item.unit_price,
                'line_total': item.line_total,
            }
            for item in self.items
        ]

    @classmethod
    def from_list(cls, rows: Iterable[dict], catalog: Optional[Iterable[Product]] = None) -> 'LineItemStore':
        items = []
        for row in rows or []:
            item = LineItem(
                product_id=str(row.get('product_id', '')),
                product_name=row.get('product_name', ''),
                quantity=coerce_quantity(row.get('quantity')),
                unit_price=coerce_unit_price(row.get('unit_price')),
            )
            item.recompute_total()
            items.append(item)
        return cls(items, catalog)
