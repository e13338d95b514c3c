"""Argument parser and command handlers for the nrs CLI."""

from __future__ import annotations

import argparse

from nrs_core import NrsPaths, RegistrySwitcher
from nrs_core.npmrc import LineRemoval
from nrs_core.profile import SORT_KEYS
from nrs_core.switcher import RegistryProbe

CLI_VERSION = "0.1.0"
PREFIX = "[nrs]"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nrs",
        description="nrs: switch the npm registry configured in .npmrc.",
    )
    parser.add_argument("--version", action="version", version=f"nrs v{CLI_VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = False

    ls_cmd = subparsers.add_parser("ls", help="list all registries")
    ls_cmd.add_argument("--sort", default="name", choices=SORT_KEYS, help="sort order")
    ls_cmd.set_defaults(func=_handle_ls)

    current_cmd = subparsers.add_parser("current", help="show the current registry")
    current_cmd.add_argument("--local", action="store_true", help="read ./.npmrc instead")
    current_cmd.set_defaults(func=_handle_current)

    use_cmd = subparsers.add_parser("use", help="switch to a registry")
    use_cmd.add_argument("name", help="registry name")
    use_cmd.add_argument("--backup", action="store_true", help="copy .npmrc to .npmrc.bak first")
    use_cmd.add_argument("--local", action="store_true", help="write ./.npmrc instead")
    use_cmd.set_defaults(func=_handle_use)

    add_cmd = subparsers.add_parser("add", help="add a custom registry")
    add_cmd.add_argument("name", help="registry name")
    add_cmd.add_argument("url", help="registry URL (http:// or https://)")
    add_cmd.set_defaults(func=_handle_add)

    remove_cmd = subparsers.add_parser("remove", help="remove a registry")
    remove_cmd.add_argument("name", help="registry name")
    remove_cmd.set_defaults(func=_handle_remove)

    reset_cmd = subparsers.add_parser("reset", help="restore the default registries")
    reset_cmd.add_argument("--yes", action="store_true", help="confirm the reset")
    reset_cmd.add_argument("--all", action="store_true", help="drop custom registries too")
    reset_cmd.set_defaults(func=_handle_reset)

    prune_cmd = subparsers.add_parser("prune", help="remove registries that are not reachable")
    prune_cmd.add_argument("--local", action="store_true", help="prune the ./.npmrc registry")
    prune_cmd.add_argument("--dry-run", action="store_true", help="report without removing")
    prune_cmd.set_defaults(func=_handle_prune)

    doctor_cmd = subparsers.add_parser("doctor", help="check the environment and profile")
    doctor_cmd.set_defaults(func=_handle_doctor)

    edit_cmd = subparsers.add_parser("edit", help="change the URL of a registry")
    edit_cmd.add_argument("name", help="registry name")
    edit_cmd.add_argument("new_url", help="new registry URL")
    edit_cmd.set_defaults(func=_handle_edit)

    show_cmd = subparsers.add_parser("show", help="print the .npmrc file")
    show_cmd.add_argument("--local", action="store_true", help="print ./.npmrc instead")
    show_cmd.set_defaults(func=_handle_show)

    test_cmd = subparsers.add_parser("test", help="test registry availability")
    test_cmd.add_argument("name", nargs="?", default="", help="registry name (all when omitted)")
    test_cmd.add_argument("--local", action="store_true", help="test the ./.npmrc registry")
    test_cmd.set_defaults(func=_handle_test)

    return parser


def _switcher(_: argparse.Namespace) -> RegistrySwitcher:
    return RegistrySwitcher(NrsPaths())


def _marker(current: bool) -> str:
    return "*" if current else " "


def _handle_ls(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    for entry in switcher.list_registries(args.sort):
        print(f"{_marker(entry.current)} {entry.name:15} {entry.url}")


def _handle_current(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    entry = switcher.current(local=args.local)
    if args.local:
        if entry is None:
            print(f"{PREFIX} no registry found in local .npmrc")
            return
        name = entry.name or "(unknown registry)"
        print(f"{PREFIX} current local registry: {name} ({entry.url}) (local .npmrc)")
        return
    if entry is None:
        print(f"{PREFIX} no registry selected")
        return
    print(f"{PREFIX} current registry: {entry.name} ({entry.url}) (global)")


def _handle_use(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    result = switcher.use(args.name, backup=args.backup, local=args.local)
    scope = "local" if args.local else "global"
    if result.backup_path is not None:
        print(f"{PREFIX} backed up .npmrc to {result.backup_path}")
    print(f"{PREFIX} switched to registry: {result.name} ({result.url}) .npmrc ({scope})")


def _handle_add(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    existing = switcher.add(args.name, args.url)
    if existing is None:
        print(f"{PREFIX} added registry: {args.name} ({args.url})")
    elif existing != args.name:
        print(
            f"{PREFIX} warning: registry URL {args.url} already exists as {existing}. "
            "Use that name or edit it."
        )
    else:
        print(f"{PREFIX} registry {args.name} already points to {args.url}")


def _handle_remove(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    switcher.remove(args.name)
    print(f"{PREFIX} removed registry: {args.name}")


def _handle_reset(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    if not switcher.reset(confirm=args.yes, all_registries=args.all):
        print(f"{PREFIX} use --yes to confirm reset")
        return
    print(f"{PREFIX} reset complete")


def _handle_prune(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    report = switcher.prune(local=args.local, dry_run=args.dry_run)
    if args.local:
        if not report.probes:
            print(f"{PREFIX} no registry found in local .npmrc")
            return
        probe = report.probes[0]
        state = "reachable" if probe.result.reachable else "NOT reachable"
        print(f"{PREFIX} local registry is {state}: {probe.url} ({probe.result.elapsed_ms}ms)")
        if probe.result.reachable:
            return
        if report.dry_run:
            print(f"{PREFIX} dry-run: would remove registry from local .npmrc")
        elif report.npmrc_change is LineRemoval.DELETED:
            print(f"{PREFIX} removed local .npmrc (no non-registry lines)")
        else:
            print(f"{PREFIX} removed registry from local .npmrc")
        return

    for probe in report.probes:
        state = "reachable" if probe.result.reachable else "unreachable"
        print(f"{PREFIX} {state}: {probe.name} - {probe.url} ({probe.result.elapsed_ms}ms)")
    if not report.unreachable:
        print(f"{PREFIX} all custom registries are reachable")
        return
    names = ", ".join(report.unreachable)
    if report.dry_run:
        print(f"{PREFIX} dry-run: would remove {len(report.unreachable)} unreachable custom registries: {names}")
        return
    print(f"{PREFIX} removed {len(report.removed)} unreachable custom registries: {names}")


def _handle_doctor(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    report = switcher.doctor()
    if report.npmrc_exists:
        print(f"{PREFIX} .npmrc found: {report.npmrc_path}")
    else:
        print(f"{PREFIX} missing .npmrc: {report.npmrc_path}")
    if report.total == 0:
        print(f"{PREFIX} no registries configured")
    else:
        print(
            f"{PREFIX} total registries: {report.total} "
            f"({report.builtin_count} default, {report.custom_count} custom)"
        )
    if report.current:
        print(f"{PREFIX} current registry: {report.current}")
    else:
        print(f"{PREFIX} no current registry set")


def _handle_edit(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    switcher.edit(args.name, args.new_url)
    print(f"{PREFIX} edited registry: {args.name} ({args.new_url})")


def _handle_show(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    content = switcher.show(local=args.local)
    if content is None:
        print(f"{PREFIX} no .npmrc file found")
        return
    print(content, end="" if content.endswith("\n") else "\n")


def _format_probe(probe: RegistryProbe) -> str:
    status = "OK" if probe.result.reachable else "Failed"
    name = probe.name or "(unknown)"
    return f"{_marker(probe.current)} {name:15} {status} - {probe.url} ({probe.result.elapsed_ms}ms)"


def _handle_test(args: argparse.Namespace) -> None:
    switcher = _switcher(args)
    probes = switcher.test(args.name or None, local=args.local)
    if args.local and not probes:
        print(f"{PREFIX} no local .npmrc or registry found")
        return
    for probe in probes:
        print(_format_probe(probe))
