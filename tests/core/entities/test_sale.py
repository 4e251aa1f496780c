"""Unit tests for sale entities."""

from shelfwise.core.entities import Sale, SaleItem, SalesRow


class TestSalesRow:
    def test_aliases_and_blanks(self):
        row = SalesRow.model_validate(
            {"receiptId": " R-1 ", "productName": "Cola", "barcode": "", "quantity": "", "unitPrice": "2.50"}
        )

        assert row.receipt_id == "R-1"
        assert row.barcode is None
        assert row.quantity is None
        assert row.unit_price == 2.5

    def test_field_names_accepted(self):
        assert SalesRow(product_name="Cola").product_name == "Cola"


class TestSale:
    def test_line_and_sale_totals(self):
        sale = Sale(
            store_id="s",
            receipt_id="R",
            items=[
                SaleItem(product_id="p1", quantity=2, unit_price=1.25),
                SaleItem(product_id="p2", quantity=1, unit_price=3.0),
            ],
        )

        assert sale.items[0].line_total == 2.5
        assert sale.total_amount == 5.5
        assert sale.source == "CSV_IMPORT"
