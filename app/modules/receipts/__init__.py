from .models import Receipt, ReceiptCheck, ReceiptKind

__all__ = ["Receipt", "ReceiptCheck", "ReceiptKind"]
