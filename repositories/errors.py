class DuplicateInvoiceNumberError(Exception):
    def __init__(self, invoice_number: str) -> None:
        super().__init__(f'Invoice number {invoice_number} already exists')
        self.invoice_number = invoice_number
