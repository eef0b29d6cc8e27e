"""Application services for hyperattest."""

from hyperattest.application.services.archive_import_service import (
    ArchiveImportService,
)
from hyperattest.application.services.atomic_list_appender import AtomicListAppender
from hyperattest.application.services.attestation_context import AttestationContext
from hyperattest.application.services.attestation_reader import (
    AttestationReader,
    AttestationRecord,
)
from hyperattest.application.services.attestation_signer import AttestationSigner
from hyperattest.application.services.attestation_writer import AttestationWriter
from hyperattest.application.services.locked_batch import LockedBatch
from hyperattest.application.services.value_crypter import ValueCrypter, new_key

__all__: list[str] = [
    "ArchiveImportService",
    "AtomicListAppender",
    "AttestationContext",
    "AttestationReader",
    "AttestationRecord",
    "AttestationSigner",
    "AttestationWriter",
    "LockedBatch",
    "ValueCrypter",
    "new_key",
]
