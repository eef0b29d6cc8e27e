"""Command line interface for hyperattest.

Commands:
    import  Attest a capture archive into a data store and a key store
    show    Read and verify one attestation
    keygen  Generate an Ed25519 signing key

Configuration comes from ATTEST_* environment variables (see
hyperattest.config.attestation_config), optionally loaded from --env-file.
"""

import asyncio
import json
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from hyperattest import __version__
from hyperattest.application.dtos.archive import ImportReport
from hyperattest.application.services.archive_import_service import (
    ENCRYPTION_KEY_ATTRIBUTE,
    ArchiveImportService,
)
from hyperattest.application.services.attestation_reader import AttestationRecord
from hyperattest.bootstrap import (
    configure_structlog,
    create_attestation_context,
    load_cid_mapping,
)
from hyperattest.config.attestation_config import AttestationConfig
from hyperattest.domain.exceptions import AttestationError
from hyperattest.infrastructure.adapters.ed25519_signer import Ed25519Signer
from hyperattest.infrastructure.adapters.ipfs_content_hasher import (
    IpfsCliContentHasher,
)
from hyperattest.infrastructure.adapters.sqlite_store import SqliteKeyValueStore
from hyperattest.infrastructure.adapters.zip_archive_reader import read_archive
from hyperattest.infrastructure.observability import (
    generate_correlation_id,
    set_correlation_id,
)


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


app = typer.Typer(
    name="hyperattest",
    help="Signed, timestamped attestations about content-addressed assets",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"hyperattest version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """hyperattest: attestation writer and reader."""
    pass


def _load_config(env_file: Optional[Path]) -> AttestationConfig:
    try:
        config = AttestationConfig.from_environment(env_file)
    except AttestationError as e:
        console.print(f"[red]Error:[/red] {e}", style="bold")
        raise typer.Exit(code=2)
    configure_structlog(config.environment)
    set_correlation_id(generate_correlation_id())
    return config


def _fail(error: AttestationError) -> None:
    console.print(f"[red]{type(error).__name__}:[/red] {error}", style="bold")
    raise typer.Exit(code=1)


@app.command("import")
def import_archive(
    data_db: Path = typer.Argument(..., help="Data store (SQLite file)"),
    key_db: Path = typer.Argument(..., help="Encryption key store (SQLite file)"),
    archive: Path = typer.Argument(..., help="Capture archive (ZIP)"),
    fail_fast: bool = typer.Option(
        False,
        "--fail-fast",
        help="Abort on the first failed attribute write",
    ),
    ipfs_binary: str = typer.Option(
        "ipfs",
        "--ipfs",
        help="ipfs executable used to compute CIDs",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        "-e",
        help="Load ATTEST_* settings from a .env file",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-o",
        help="Output format: text or json",
    ),
) -> None:
    """Attest the asset, identity and metadata of a capture archive.

    Example:
        hyperattest import data.db keys.db capture.zip
    """
    config = _load_config(env_file)
    try:
        report = asyncio.run(
            _import_async(config, data_db, key_db, archive, fail_fast, ipfs_binary)
        )
    except AttestationError as e:
        _fail(e)

    if output_format == OutputFormat.json:
        print(
            json.dumps(
                {
                    "asset_cid": str(report.asset_cid),
                    "archive_cid": str(report.archive_cid),
                    "written": report.written,
                    "failures": [
                        {"attribute": f.label, "error": f.error_type, "message": f.message}
                        for f in report.failures
                    ],
                },
                indent=2,
            )
        )
    else:
        _print_report(report)

    if not report.ok:
        raise typer.Exit(code=1)


async def _import_async(
    config: AttestationConfig,
    data_db: Path,
    key_db: Path,
    archive: Path,
    fail_fast: bool,
    ipfs_binary: str,
) -> ImportReport:
    """Async implementation of archive import."""
    context = create_attestation_context(config)
    service = ArchiveImportService(
        context,
        SqliteKeyValueStore(data_db),
        SqliteKeyValueStore(key_db),
        IpfsCliContentHasher(ipfs_binary),
        load_cid_mapping(config.cid_mapping_path),
    )
    contents = read_archive(archive)
    return await service.import_archive(contents, fail_fast=fail_fast)


def _print_report(report: ImportReport) -> None:
    console.print(f"Asset CID:   [cyan]{report.asset_cid}[/cyan]")
    console.print(f"Archive CID: [cyan]{report.archive_cid}[/cyan]")

    table = Table(title="Attributes")
    table.add_column("Attribute", style="cyan")
    table.add_column("Status")
    for label in report.written:
        table.add_row(label, "[green]written[/green]")
    for failure in report.failures:
        table.add_row(failure.label, f"[red]{failure.error_type}[/red]: {failure.message}")
    console.print(table)

    if report.ok:
        console.print("[green]Import complete[/green]")
    else:
        console.print(f"[red]{len(report.failures)} attribute(s) failed[/red]")


@app.command()
def show(
    db: Path = typer.Argument(..., help="Data store (SQLite file)"),
    subject: str = typer.Argument(..., help="Subject CID"),
    attribute: str = typer.Argument(..., help="Attribute name"),
    key_db: Optional[Path] = typer.Option(
        None,
        "--key-db",
        "-k",
        help="Key store holding the subject's encryption key",
    ),
    public_key: Optional[str] = typer.Option(
        None,
        "--public-key",
        "-p",
        help="Signer public key (hex); defaults to the configured signing key",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        "-e",
        help="Load ATTEST_* settings from a .env file",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-o",
        help="Output format: text or json",
    ),
) -> None:
    """Read one attestation, verifying its signature and timestamp.

    Example:
        hyperattest show data.db bafkrei... filename
        hyperattest show data.db bafkrei... location --key-db keys.db
    """
    config = _load_config(env_file)
    try:
        verify_key = bytes.fromhex(public_key) if public_key else None
    except ValueError:
        console.print("[red]Error:[/red] --public-key must be hex", style="bold")
        raise typer.Exit(code=2)

    try:
        record = asyncio.run(
            _show_async(config, db, subject, attribute, key_db, verify_key)
        )
    except AttestationError as e:
        _fail(e)

    if record is None:
        console.print(f"[yellow]No attestation for {subject}/{attribute}[/yellow]")
        raise typer.Exit(code=1)

    if output_format == OutputFormat.json:
        print(
            json.dumps(
                {
                    "subject": str(record.subject),
                    "attribute": record.attribute,
                    "value": record.attribute_value.to_wire()["value"],
                    "kind": record.attribute_value.kind.value,
                    "encrypted": record.encrypted,
                    "timestamp": record.timestamp.to_dict(),
                },
                indent=2,
            )
        )
        return

    wire_value = json.dumps(
        record.attribute_value.to_wire()["value"], ensure_ascii=False
    )
    console.print(f"[bold]{record.subject}[/bold] / [cyan]{record.attribute}[/cyan]")
    console.print(f"  kind:      {record.attribute_value.kind.value}")
    console.print(f"  value:     {wire_value}")
    console.print(f"  encrypted: {record.encrypted}")
    console.print(f"  timestamp: {record.timestamp.authority} ({record.timestamp.digest})")
    console.print("[green]Signature and timestamp verified[/green]")


async def _show_async(
    config: AttestationConfig,
    db: Path,
    subject: str,
    attribute: str,
    key_db: Optional[Path],
    public_key: Optional[bytes],
) -> Optional[AttestationRecord]:
    """Async implementation of show."""
    context = create_attestation_context(config)
    encryption_key = None
    if key_db is not None:
        key_record = await context.db_get(
            SqliteKeyValueStore(key_db),
            subject,
            ENCRYPTION_KEY_ATTRIBUTE,
            public_key=public_key,
        )
        if key_record is not None:
            encryption_key = key_record.value
    return await context.db_get(
        SqliteKeyValueStore(db),
        subject,
        attribute,
        encryption_key=encryption_key,
        public_key=public_key,
    )


@app.command()
def keygen(
    path: Path = typer.Argument(..., help="Where to write the PEM private key"),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing file",
    ),
) -> None:
    """Generate an Ed25519 signing key (PKCS#8 PEM).

    Example:
        hyperattest keygen signing-key.pem
    """
    if path.exists() and not force:
        console.print(f"[red]Error:[/red] {path} exists (use --force)", style="bold")
        raise typer.Exit(code=1)

    signer = Ed25519Signer.generate()
    path.write_bytes(signer.private_key_pem())
    path.chmod(0o600)
    console.print(f"Wrote signing key to {path}")
    console.print(f"Public key: [cyan]{signer.public_key_bytes().hex()}[/cyan]")


if __name__ == "__main__":
    app()
