#!/usr/bin/env python3
"""
Fast Command Settings CLI Tool

Command-line interface for the settings version history: inspect versions and the
audit log, validate, import/export, publish and roll back without going through
the web API. Operates directly on the JSON files in the data directory.
"""

import argparse
import json
import sys
from pathlib import Path
import logging

# Add the parent directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Config
from fastcommand.services import (
    MissingContentError,
    ValidationFailedError,
    VersionNotFoundError,
    build_settings_service,
)

CLI_AUTHOR = {'id': 'cli', 'name': 'cli'}


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _service(args):
    return build_settings_service(args.data_dir, validate_on_rollback=args.validate_on_rollback)


def _print_issues(issues):
    for issue in issues:
        print(f"   [{issue.severity.value}] {issue.path}: {issue.message}")


def list_versions(args):
    """List all settings versions, newest first."""
    versions = _service(args).list_versions()
    if not versions:
        print("No settings versions found.")
        return True

    print(f"Found {len(versions)} versions:")
    print()
    for version in versions:
        author = version.author.get('name') or version.author.get('id')
        changed = ', '.join(d.key for d in version.diffs) or '-'
        print(f"{version.id}  {version.status.value:<9}  {version.created_at}  {author}")
        print(f"   {version.message}  (changed: {changed})")
    return True


def show_audit_log(args):
    """Show the settings audit log, newest first."""
    entries = _service(args).get_audit_log()
    if not entries:
        print("Audit log is empty.")
        return True
    for entry in entries:
        user = entry.user.get('name') or entry.user.get('id')
        print(f"{entry.created_at}  {entry.type.value:<28}  {user}  {json.dumps(entry.details, ensure_ascii=False)[:120]}")
    return True


def validate(args):
    """Validate a version (or the published settings)."""
    issues = _service(args).validate_version(args.version_id)
    if not issues:
        print("✅ No validation issues")
        return True
    print(f"Found {len(issues)} issue(s):")
    _print_issues(issues)
    return not any(issue.is_error for issue in issues)


def export_settings(args):
    """Write the published settings as JSON to a file or stdout."""
    text = _service(args).export_published()
    if args.output:
        Path(args.output).write_text(text, encoding='utf-8')
        print(f"✅ Published settings exported to {args.output}")
    else:
        print(text)
    return True


def import_settings(args):
    """Import a settings JSON file as a new draft."""
    try:
        content = json.loads(Path(args.file).read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as e:
        print(f"❌ Could not read {args.file}: {e}")
        return False
    try:
        version = _service(args).import_content(_author(args), content)
    except MissingContentError:
        print("❌ File does not contain a settings document")
        return False
    print("✅ Imported as draft")
    print(f"   ID: {version.id}")
    print(f"   Changed sections: {', '.join(d.key for d in version.diffs) or '-'}")
    return True


def publish(args):
    """Publish a draft version."""
    try:
        version, _issues = _service(args).publish(args.version_id, _author(args))
    except VersionNotFoundError:
        print(f"❌ Version not found: {args.version_id}")
        return False
    except ValidationFailedError as e:
        print(f"❌ Publish blocked by {len(e.issues)} validation issue(s):")
        _print_issues(e.issues)
        return False
    print(f"✅ Published {version.id}")
    return True


def rollback(args):
    """Re-publish an earlier version."""
    try:
        version = _service(args).rollback(args.version_id, _author(args))
    except VersionNotFoundError:
        print(f"❌ Version not found: {args.version_id}")
        return False
    except ValidationFailedError as e:
        print(f"❌ Rollback blocked by {len(e.issues)} validation issue(s):")
        _print_issues(e.issues)
        return False
    print(f"✅ Rolled back to {args.version_id}")
    print(f"   New version: {version.id}")
    return True


def _author(args):
    if args.author:
        return {'id': args.author, 'name': args.author}
    return dict(CLI_AUTHOR)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Fast Command Settings CLI Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s versions
  %(prog)s validate --version-id v_1a2b3c
  %(prog)s import settings.json --author admin
  %(prog)s publish v_1a2b3c
  %(prog)s rollback v_0f9e8d
  %(prog)s export --output published.json
        """
    )

    parser.add_argument('--data-dir', default=Config.DATA_DIR,
                        help=f'Settings data directory (default: {Config.DATA_DIR})')
    parser.add_argument('--author', help='Author id recorded in the audit log (default: cli)')
    parser.add_argument('--validate-on-rollback', action='store_true',
                        default=Config.SETTINGS_VALIDATE_ON_ROLLBACK,
                        help='Re-validate content before rolling back to it')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('versions', help='List settings versions')
    subparsers.add_parser('audit-log', help='Show the settings audit log')

    validate_parser = subparsers.add_parser('validate', help='Validate a version or the published settings')
    validate_parser.add_argument('--version-id', help='Version to validate (default: published settings)')

    export_parser = subparsers.add_parser('export', help='Export published settings')
    export_parser.add_argument('--output', '-o', help='Output file (default: stdout)')

    import_parser = subparsers.add_parser('import', help='Import a settings JSON file as a draft')
    import_parser.add_argument('file', help='Path to the settings JSON file')

    publish_parser = subparsers.add_parser('publish', help='Publish a draft version')
    publish_parser.add_argument('version_id', help='ID of the version to publish')

    rollback_parser = subparsers.add_parser('rollback', help='Roll back to an earlier version')
    rollback_parser.add_argument('version_id', help='ID of the version to restore')

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    commands = {
        'versions': list_versions,
        'audit-log': show_audit_log,
        'validate': validate,
        'export': export_settings,
        'import': import_settings,
        'publish': publish,
        'rollback': rollback,
    }

    try:
        success = commands[args.command](args)
        return 0 if success else 1
    except KeyboardInterrupt:
        print("\n❌ Operation cancelled by user")
        return 1
    except OSError as e:
        print(f"❌ Settings storage error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
