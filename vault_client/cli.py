"""
Vault CLI - Command line interface for the Vault client.

Commands authenticate with the configured credentials, run one
operation and print the result:
- Session check
- Vault object, binder and document lookups
- Ordered binder membership changes
- Document file replacement
- Document relationships
"""

import sys
import logging
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

import click

from . import __version__, __prog_name__
from .api import VaultClient
from .config import ConfigManager, get_config_manager
from .exceptions import (
    VaultError,
    AuthenticationError,
    SequencePartialFailureError,
    ProtocolStateError,
)
from .utils import (
    OutputFormat,
    print_error,
    print_info,
    print_json,
    print_success,
    print_table,
    setup_logging,
)

logger = logging.getLogger(__name__)


# ============================================================================
# CLI Context and Common Options
# ============================================================================

class VaultContext:
    """CLI context object for sharing state between commands."""

    def __init__(self):
        self.config_manager: ConfigManager = None  # type: ignore[assignment]


pass_context = click.make_pass_decorator(VaultContext, ensure=True)


def common_options(f):
    """Common options for all commands."""
    f = click.option(
        '-v', '--verbose',
        is_flag=True,
        help='Trace every API call'
    )(f)
    f = click.option(
        '-q', '--quiet',
        is_flag=True,
        help='Suppress non-essential output'
    )(f)
    return f


def format_option(f):
    return click.option(
        '-f', '--format',
        'output_format',
        type=click.Choice(['table', 'json']),
        default='table',
        help='Output format'
    )(f)


def run_with_client(
    ctx: VaultContext,
    verbose: bool,
    quiet: bool,
    operation: Callable[[VaultClient], Any],
) -> Any:
    """Authenticate, run ``operation`` and exit 1 on any Vault error."""
    setup_logging(verbose, quiet)
    config = ctx.config_manager.get()

    if not config.is_configured():
        print_error(
            "Vault credentials are not configured.",
            f"Create {ctx.config_manager.get_config_path()} or set "
            "VAULT_HOST, VAULT_USERNAME and VAULT_PASSWORD."
        )
        sys.exit(1)

    try:
        with VaultClient(config, verbose=verbose or None) as client:
            client.authenticate(config.credentials())
            return operation(client)
    except AuthenticationError as e:
        print_error(f"Authentication failed: {e}")
        sys.exit(1)
    except SequencePartialFailureError as e:
        print_error(
            str(e),
            f"Applied: {e.completed}  Not attempted: {e.pending}"
        )
        sys.exit(1)
    except ProtocolStateError as e:
        hint = "Unlock the document in Vault before retrying." if e.locked else None
        print_error(str(e), hint)
        sys.exit(1)
    except VaultError as e:
        print_error(str(e))
        sys.exit(1)


# ============================================================================
# Main CLI Group
# ============================================================================

@click.group()
@click.version_option(version=__version__, prog_name=__prog_name__)
@click.option(
    '--config', 'config_path',
    type=click.Path(path_type=Path),
    envvar='VAULT_CONFIG',
    help='Credentials file (default: ./credentials.json)'
)
@click.pass_context
def cli(ctx, config_path: Optional[Path]):
    """
    Vault CLI - work with documents and binders in a Veeva Vault.

    \b
    The credentials file is JSON:
      {"host": "https://myvault.veevavault.com/api/v13.0",
       "username": "...", "password": "..."}

    \b
    Environment Variables:
      VAULT_CONFIG     - Credentials file path
      VAULT_HOST       - Vault API URL (overrides the file)
      VAULT_USERNAME   - Username (overrides the file)
      VAULT_PASSWORD   - Password (overrides the file)
    """
    ctx.ensure_object(VaultContext)
    ctx.obj.config_manager = get_config_manager(config_path)


@cli.command('check')
@common_options
@pass_context
def check(ctx: VaultContext, verbose: bool, quiet: bool):
    """Authenticate with the configured credentials."""
    run_with_client(ctx, verbose, quiet, lambda client: None)
    print_success("Authenticated successfully.")


# ============================================================================
# Lookup Commands
# ============================================================================

@cli.command('objects')
@click.argument('object_type')
@common_options
@format_option
@pass_context
def objects(ctx: VaultContext, object_type: str, verbose: bool, quiet: bool, output_format: str):
    """
    List records of a Vault object type.

    \b
    Examples:
      vault objects product__v
      vault objects country__v --format json
    """
    records = run_with_client(ctx, verbose, quiet, lambda c: c.get_vault_objects(object_type))

    if OutputFormat(output_format) == OutputFormat.JSON:
        print_json(records)
        return
    if not records:
        print_info(f"No {object_type} records found.")
        return
    print_table(
        ["ID", "Name"],
        [[r.get('id'), r.get('name__v', r.get('name'))] for r in records]
    )


@cli.command('binders')
@common_options
@format_option
@pass_context
def binders(ctx: VaultContext, verbose: bool, quiet: bool, output_format: str):
    """List binders."""
    found = run_with_client(ctx, verbose, quiet, lambda c: c.get_binders())

    if OutputFormat(output_format) == OutputFormat.JSON:
        print_json(found)
        return
    if not found:
        print_info("No binders found.")
        return
    print_table(
        ["ID", "Name", "Title", "Status"],
        [[b.get('id'), b.get('name__v'), b.get('title__v'), b.get('status__v')] for b in found]
    )


@cli.command('binder-documents')
@click.argument('binder_id')
@common_options
@format_option
@pass_context
def binder_documents(ctx: VaultContext, binder_id: str, verbose: bool, quiet: bool, output_format: str):
    """List the documents of a binder, in binder order."""
    nodes = run_with_client(ctx, verbose, quiet, lambda c: c.get_binder_documents(binder_id))

    if OutputFormat(output_format) == OutputFormat.JSON:
        print_json(nodes)
        return
    if not nodes:
        print_info(f"Binder {binder_id} has no documents.")
        return
    print_table(
        ["Position", "Node ID", "Document ID"],
        [[i, n['node_id'], n['document_id']] for i, n in enumerate(nodes, start=1)]
    )


@cli.command('document')
@click.argument('document_id')
@common_options
@pass_context
def document(ctx: VaultContext, document_id: str, verbose: bool, quiet: bool):
    """Show the fields of a document as JSON."""
    print_json(run_with_client(ctx, verbose, quiet, lambda c: c.get_document(document_id)))


@cli.command('relationships')
@click.argument('document_id')
@click.argument('version_major')
@click.argument('version_minor')
@common_options
@pass_context
def relationships(
    ctx: VaultContext,
    document_id: str,
    version_major: str,
    version_minor: str,
    verbose: bool,
    quiet: bool
):
    """Show the relationships of a document version as JSON."""
    ref = {"id": document_id, "version_major": version_major, "version_minor": version_minor}
    print_json(run_with_client(ctx, verbose, quiet, lambda c: c.get_document_relationships(ref)))


# ============================================================================
# Mutation Commands
# ============================================================================

@cli.command('set-binder-documents')
@click.argument('binder_id')
@click.argument('document_ids', nargs=-1, required=True)
@common_options
@pass_context
def set_binder_documents(
    ctx: VaultContext,
    binder_id: str,
    document_ids: Tuple[str, ...],
    verbose: bool,
    quiet: bool
):
    """
    Add documents to a binder, in the order given.

    \b
    Examples:
      vault set-binder-documents 42 101 102 103
    """
    applied = run_with_client(
        ctx, verbose, quiet, lambda c: c.set_binder_documents(binder_id, list(document_ids))
    )
    print_success(f"Added {len(applied)} document(s) to binder {binder_id}.")


@cli.command('remove-binder-documents')
@click.argument('binder_id')
@click.argument('node_ids', nargs=-1, required=True)
@common_options
@pass_context
def remove_binder_documents(
    ctx: VaultContext,
    binder_id: str,
    node_ids: Tuple[str, ...],
    verbose: bool,
    quiet: bool
):
    """
    Remove documents from a binder by node id.

    Node ids are listed by 'vault binder-documents'.
    """
    removed = run_with_client(
        ctx, verbose, quiet, lambda c: c.remove_binder_documents(binder_id, list(node_ids))
    )
    print_success(f"Removed {len(removed)} document(s) from binder {binder_id}.")


@cli.command('upload-file')
@click.argument('document_id')
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@common_options
@pass_context
def upload_file(ctx: VaultContext, document_id: str, file_path: Path, verbose: bool, quiet: bool):
    """Replace the file of an existing document (lock, upload, unlock)."""
    run_with_client(ctx, verbose, quiet, lambda c: c.update_document_file(document_id, file_path))
    print_success(f"Updated file of document {document_id}.")


def main():
    """Main entry point."""
    cli(obj=VaultContext())


if __name__ == '__main__':
    main()
