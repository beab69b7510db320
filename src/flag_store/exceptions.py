"""Store-level exceptions.

These carry no business meaning. Callers translate them into their own
domain errors where appropriate.
"""


class StoreError(Exception):
    """Base exception for document store failures."""

    def __init__(self, message: str = "Document store error"):
        self.message = message
        super().__init__(self.message)


class DuplicateKeyError(StoreError):
    """A write violated a unique constraint of the collection.

    Attributes
    ----------
    collection
        Name of the collection (table) the write targeted
    fields
        Field names covered by the violated constraint; empty when the
        constraint could not be identified from the driver's message
    """

    def __init__(self, collection: str, fields: tuple[str, ...] = ()):
        self.collection = collection
        self.fields = fields
        if fields:
            message = f"Duplicate value for {', '.join(fields)} in {collection}"
        else:
            message = f"Duplicate key in {collection}"
        super().__init__(message)
