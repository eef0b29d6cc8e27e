"""Type mismatch errors for list attributes."""

from hyperattest.domain.exceptions import AttestationError


class TypeMismatchError(AttestationError):
    """Raised when appending onto an attribute that does not hold a list.

    List attributes stay list-typed for their lifetime. A stored scalar or
    structured value is never coerced into a list or overwritten by an
    append; the stored value is left unchanged.

    Attributes:
        subject: Content identifier of the record.
        attribute: Attribute name of the record.
        actual_kind: The kind of value currently stored.
    """

    def __init__(self, subject: str, attribute: str, actual_kind: str) -> None:
        """Initialize with the record coordinates and stored kind.

        Args:
            subject: Content identifier of the record.
            attribute: Attribute name of the record.
            actual_kind: Kind of the value currently stored.
        """
        super().__init__(
            f"A non-list value ({actual_kind}) is stored at {subject}/{attribute}"
        )
        self.subject = subject
        self.attribute = attribute
        self.actual_kind = actual_kind
