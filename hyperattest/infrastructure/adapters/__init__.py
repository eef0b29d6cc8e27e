"""Production adapters implementing the application ports."""

from hyperattest.infrastructure.adapters.ed25519_signer import (
    Ed25519Signer,
    load_signing_key_from_pem,
    signing_key_to_pem,
)
from hyperattest.infrastructure.adapters.ipfs_content_hasher import (
    IpfsCliContentHasher,
)
from hyperattest.infrastructure.adapters.opentimestamps_calendar import (
    DEFAULT_CALENDAR_URL,
    OpenTimestampsCalendarClient,
)
from hyperattest.infrastructure.adapters.sqlite_store import (
    SqliteBatch,
    SqliteKeyValueStore,
)
from hyperattest.infrastructure.adapters.zip_archive_reader import read_archive

__all__ = [
    "DEFAULT_CALENDAR_URL",
    "Ed25519Signer",
    "IpfsCliContentHasher",
    "OpenTimestampsCalendarClient",
    "SqliteBatch",
    "SqliteKeyValueStore",
    "load_signing_key_from_pem",
    "read_archive",
    "signing_key_to_pem",
]
