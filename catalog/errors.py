# Domain errors raised by the store and the logic layer.
# catalog.main turns them into {"detail": message} responses.


class CatalogError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(CatalogError):
    status_code = 400
    message = "Missing required fields"


class NotFoundError(CatalogError):
    status_code = 404
    message = "Product not found"


class StoreReadError(CatalogError):
    message = "Error reading products"


class StoreWriteError(CatalogError):
    message = "Error saving products"
