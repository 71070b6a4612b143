from .models import Client, Supplier

__all__ = ["Client", "Supplier"]
