"""Ports (abstract collaborator interfaces) for hyperattest.

Infrastructure adapters implement these; services depend only on them.
"""

from hyperattest.application.ports.content_hasher import ContentHasherProtocol
from hyperattest.application.ports.kv_store import BatchPort, KeyValueStorePort, WriteTarget
from hyperattest.application.ports.signer import SignerProtocol
from hyperattest.application.ports.timestamp_authority import TimestampAuthorityProtocol

__all__: list[str] = [
    "BatchPort",
    "ContentHasherProtocol",
    "KeyValueStorePort",
    "SignerProtocol",
    "TimestampAuthorityProtocol",
    "WriteTarget",
]
