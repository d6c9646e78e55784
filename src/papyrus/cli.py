"""CLI entry point for papyrus."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from . import __version__
from .config import ConfigError, PapyrusConfig, default_config_text, load_config
from .cycles import find_cycles, format_cycle
from .expander import DependencyNode, Expander
from .log import configure_logging
from .prompts import list_prompts, read_prompt, save_prompt
from .state import STATE_DIR_NAME, StoreError, write_json
from .store import DataStore


@dataclass(frozen=True)
class Context:
    config: PapyrusConfig
    store: DataStore
    expander: Expander


def _context(cwd: Path | None = None) -> Context:
    config = load_config(cwd)
    configure_logging(config.log_level, config.log_dir)
    store = DataStore(config.state_dir)

    def root_path() -> str:
        return config.root_path or store.get_root_path()

    expander = Expander(store.get_substitutes, root_path, max_depth=config.max_depth)
    return Context(config=config, store=store, expander=expander)


def _text_parser(prog: str) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=f"papyrus {prog}")
    p.add_argument("text", nargs="*")
    p.add_argument("--json", action="store_true")
    return p


def _print_json(data: object) -> None:
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
    print()


def cmd_init(console: Console) -> int:
    state_dir = Path.cwd() / STATE_DIR_NAME
    state_dir.mkdir(exist_ok=True)
    (state_dir / "prompts").mkdir(exist_ok=True)

    config_path = state_dir / "config.toml"
    if not config_path.exists():
        config_path.write_text(default_config_text(), encoding="utf-8")
    if not (state_dir / "substitutes.json").exists():
        write_json(state_dir / "substitutes.json", {})
    if not (state_dir / "root_path.json").exists():
        write_json(state_dir / "root_path.json", "")

    console.print(Panel(
        f"Initialized [bold]{STATE_DIR_NAME}/[/bold] in {escape(str(Path.cwd()))}",
        style="green",
        expand=False,
    ))
    return 0


def cmd_expand(argv: list[str], console: Console) -> int:
    p = _text_parser("expand")
    p.add_argument("--file", default=None)
    p.add_argument("--prompt", default=None)
    args = p.parse_args(argv)
    ctx = _context()

    if args.prompt:
        prompt = read_prompt(ctx.config.state_dir, args.prompt)
        if prompt is None:
            console.print(Text(f"Prompt not found: {args.prompt}", style="red"))
            return 1
        text = prompt.body
    elif args.file:
        text = Path(args.file).read_text(encoding="utf-8")
    else:
        text = " ".join(args.text)
    if not text:
        console.print(Text("Nothing to expand.", style="red"))
        return 1

    expanded = ctx.expander.expand(text)
    if args.json:
        _print_json({"input": text, "expanded": expanded})
        return 0
    sys.stdout.write(expanded)
    if not expanded.endswith("\n"):
        sys.stdout.write("\n")
    return 0


def cmd_links(argv: list[str], console: Console) -> int:
    args = _text_parser("links").parse_args(argv)
    ctx = _context()
    links = ctx.expander.extract_links(" ".join(args.text))
    if args.json:
        _print_json([
            {"full": link.marker, "content": link.reference, "index": link.offset}
            for link in links
        ])
        return 0
    if not links:
        console.print("[dim]No links found.[/dim]")
        return 0
    table = Table(expand=False, show_edge=False, pad_edge=False)
    table.add_column("Offset", style="dim", justify="right")
    table.add_column("Reference", style="bold")
    table.add_column("Marker", style="dim")
    for link in links:
        table.add_row(str(link.offset), Text(link.reference), Text(link.marker))
    console.print(table)
    return 0


def cmd_validate(argv: list[str], console: Console) -> int:
    args = _text_parser("validate").parse_args(argv)
    ctx = _context()
    results = ctx.expander.validate_links(" ".join(args.text))
    ok = all(r.valid for r in results)
    if args.json:
        _print_json([r.to_dict() for r in results])
        return 0 if ok else 1

    table = Table(expand=False, show_edge=False, pad_edge=False)
    table.add_column("Link", style="bold")
    table.add_column("Status")
    table.add_column("Detail", style="dim")
    for r in results:
        status = Text("ok", style="green") if r.valid else Text("invalid", style="red")
        table.add_row(Text(r.reference), status, Text(r.error or r.kind or ""))
    console.print(table)
    return 0 if ok else 1


def _render_tree(branch: Tree, node: DependencyNode) -> None:
    styles = {"circular": "yellow", "missing": "red", "error": "red"}
    for link in node.links:
        label = Text(link.name, style="bold")
        label.append(f" ({link.type})", style=styles.get(link.type, "dim"))
        if link.error:
            label.append(f" {link.error}", style="dim")
        child = branch.add(label)
        if link.children is not None:
            _render_tree(child, link.children)


def cmd_tree(argv: list[str], console: Console) -> int:
    args = _text_parser("tree").parse_args(argv)
    ctx = _context()
    node = ctx.expander.dependency_tree(" ".join(args.text))
    if args.json:
        _print_json(node.to_dict())
        return 0
    tree = Tree(Text(node.content or "(empty)", style="dim"))
    _render_tree(tree, node)
    console.print(tree)
    return 0


def cmd_cycles(argv: list[str], console: Console) -> int:
    ctx = _context()
    cycles = find_cycles(ctx.store.get_substitutes())
    if "--json" in argv:
        _print_json(cycles)
    elif cycles:
        console.print(Text(f"{len(cycles)} substitute cycle(s):", style="yellow"))
        for cycle in cycles:
            console.print(f"  {escape(format_cycle(cycle))}")
    else:
        console.print(Text("No substitute cycles.", style="green"))
    return 1 if cycles else 0


def cmd_subs(argv: list[str], console: Console) -> int:
    ctx = _context()
    store = ctx.store
    action = argv[0] if argv and argv[0] != "--json" else "list"

    if action == "set":
        if len(argv) < 3:
            console.print(Text("usage: papyrus subs set NAME TEXT...", style="red"))
            return 1
        store.set_substitute(argv[1], " ".join(argv[2:]))
        console.print(f"Saved substitute [bold]{escape(argv[1])}[/bold]")
        return 0

    if action == "rm":
        if len(argv) != 2:
            console.print(Text("usage: papyrus subs rm NAME", style="red"))
            return 1
        if not store.remove_substitute(argv[1]):
            console.print(Text(f"Substitute not found: {argv[1]}", style="red"))
            return 1
        console.print(f"Removed substitute [bold]{escape(argv[1])}[/bold]")
        return 0

    if action != "list":
        console.print(Text(f"Unknown subs action: {action}", style="red"))
        return 1

    subs = store.get_substitutes()
    if "--json" in argv:
        _print_json(subs)
        return 0
    if not subs:
        console.print("[dim]No substitutes defined.[/dim]")
        return 0
    table = Table(title="Substitutes", expand=False, show_edge=False, pad_edge=False)
    table.add_column("Name", style="bold")
    table.add_column("Value")
    for name, value in subs.items():
        preview = value.replace("\n", " ")
        table.add_row(Text(name), Text(preview[:60] + ("..." if len(preview) > 60 else "")))
    console.print(table)
    return 0


def cmd_root(argv: list[str], console: Console) -> int:
    ctx = _context()
    if argv:
        path = ctx.store.save_root_path(argv[0])
        console.print(f"Root path set to [bold]{escape(str(path))}[/bold]")
        return 0
    root = ctx.config.root_path or ctx.store.get_root_path()
    if not root:
        console.print(Text("Root path not set.", style="yellow"))
        return 1
    console.print(root, markup=False, highlight=False)
    return 0


def cmd_prompts(argv: list[str], console: Console) -> int:
    ctx = _context()
    state_dir = ctx.config.state_dir

    if argv and argv[0] == "add":
        p = argparse.ArgumentParser(prog="papyrus prompts add")
        p.add_argument("name")
        p.add_argument("text", nargs="+")
        p.add_argument("--description", default="")
        args = p.parse_args(argv[1:])
        prompt = save_prompt(state_dir, args.name, " ".join(args.text), description=args.description)
        console.print(f"Saved prompt [bold]{escape(prompt.name)}[/bold]")
        return 0

    prompts = list_prompts(state_dir)
    if not prompts:
        console.print("[dim]No prompts defined.[/dim]")
        return 0
    table = Table(title="Prompts", expand=False, show_edge=False, pad_edge=False)
    table.add_column("Name", style="bold")
    table.add_column("Description", style="dim")
    for prompt in prompts:
        table.add_row(Text(prompt.name), Text(prompt.description))
    console.print(table)
    return 0


def cmd_check(argv: list[str], console: Console) -> int:
    p = argparse.ArgumentParser(prog="papyrus check")
    p.add_argument("--backup", action="store_true")
    args = p.parse_args(argv)
    ctx = _context()
    if args.backup:
        target = ctx.store.backup()
        console.print(f"Backup created at [bold]{escape(str(target))}[/bold]")
    issues = ctx.store.validate()
    if not issues:
        console.print(Text("No issues found.", style="green"))
        return 0
    for issue in issues:
        console.print(Text(issue, style="yellow"))
    return 1


def _print_help(console: Console) -> None:
    help_text = Text()
    help_text.append("papyrus", style="bold")
    help_text.append(f" {__version__}", style="dim")
    help_text.append(": recursive {{link}} expansion for prompt text")
    console.print(help_text)
    console.print()

    cmds = Table(show_header=False, expand=False, show_edge=False, pad_edge=False, box=None)
    cmds.add_column("Command", style="bold cyan")
    cmds.add_column("Description")
    cmds.add_row(Text("papyrus init"), "Scaffold .papyrus/ directory")
    cmds.add_row(Text("papyrus expand <text>"), "Expand links (--file PATH, --prompt NAME)")
    cmds.add_row(Text("papyrus links <text>"), "List links without resolving them")
    cmds.add_row(Text("papyrus validate <text>"), "Check each top-level link")
    cmds.add_row(Text("papyrus tree <text>"), "Show nested link dependencies")
    cmds.add_row(Text("papyrus cycles"), "Report circular substitutes")
    cmds.add_row(Text("papyrus subs [set|rm]"), "List or edit substitutes")
    cmds.add_row(Text("papyrus root [path]"), "Show or set the sandbox root")
    cmds.add_row(Text("papyrus prompts [add]"), "List or add prompts")
    cmds.add_row(Text("papyrus check [--backup]"), "Validate stored data, optionally back it up first")
    console.print(cmds)
    console.print()

    opts = Table(show_header=False, expand=False, show_edge=False, pad_edge=False, box=None)
    opts.add_column("Option", style="bold")
    opts.add_column("Description", style="dim")
    opts.add_row("--json", "JSON output")
    opts.add_row("--version", "Show version")
    console.print(opts)


COMMANDS = {
    "expand": cmd_expand,
    "links": cmd_links,
    "validate": cmd_validate,
    "tree": cmd_tree,
    "cycles": cmd_cycles,
    "subs": cmd_subs,
    "root": cmd_root,
    "prompts": cmd_prompts,
    "check": cmd_check,
}


def main(argv: list[str] | None = None) -> None:
    raw = argv if argv is not None else sys.argv[1:]
    console = Console()

    if raw == ["--version"]:
        console.print(Text(f"papyrus {__version__}", style="bold"))
        sys.exit(0)
    if not raw or raw == ["--help"] or raw == ["-h"]:
        _print_help(console)
        sys.exit(0)

    try:
        if raw[0] == "init":
            sys.exit(cmd_init(console))
        handler = COMMANDS.get(raw[0])
        if handler is None:
            # Anything else is text to expand.
            sys.exit(cmd_expand(raw, console))
        sys.exit(handler(raw[1:], console))
    except (ConfigError, StoreError, OSError) as exc:
        console.print(Text(str(exc), style="red"))
        sys.exit(1)


if __name__ == "__main__":
    main()
