"""Domain models for hyperattest.

Import from the submodules directly:
- content_identifier: ContentIdentifier
- attribute_value: AttributeValue, ValueKind
- timestamp_proof: TimestampProof
- stored_record: StoredRecord, PlainAttestation, EncryptedAttestation
"""
