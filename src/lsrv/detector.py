"""Correlate listening sockets with git repositories."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .config import Settings
from .console import debug
from .context import RepoContext, check_repos, resolve_contexts
from .cwd import CwdResolver, get_cwd_resolver
from .system import ListenerRecord, ListenerScanner


@dataclass(frozen=True)
class ServerEntry:
    """A development server running inside a git repository."""

    repo: str
    branch: str
    process: str
    port: int
    cwd: str
    pid: int = 0  # First process seen for this entry, display only

    @property
    def key(self) -> tuple[str, str, str, int]:
        """Identity used for deduplication."""
        return (self.repo, self.branch, self.process, self.port)

    @property
    def url(self) -> str:
        """Local URL for the server."""
        return f"http://localhost:{self.port}"


def sort_servers(servers: Iterable[ServerEntry]) -> list[ServerEntry]:
    """Sort servers by repo, branch, then port."""
    return sorted(servers, key=lambda s: (s.repo, s.branch, s.port))


def correlate(
    records: Iterable[ListenerRecord],
    cwd_map: Mapping[int, str],
    repo_cache: Mapping[str, bool],
    contexts: Mapping[str, RepoContext],
) -> list[ServerEntry]:
    """Join listener records with their repository context.

    Records without a known working directory, outside a repository or
    without a resolved context are dropped, as are duplicates of an
    already emitted (repo, branch, process, port).

    Args:
        records: Listener records from the scanner
        cwd_map: PID -> working directory
        repo_cache: Directory -> is inside a git repository
        contexts: Directory -> repository name and branch

    Returns:
        Sorted, deduplicated server list
    """
    seen: set[tuple[str, str, str, int]] = set()
    servers: list[ServerEntry] = []

    for record in records:
        cwd = cwd_map.get(record.pid)
        if not cwd:
            continue

        if not repo_cache.get(cwd, False):
            continue

        ctx = contexts.get(cwd)
        if ctx is None:
            continue

        server = ServerEntry(
            repo=ctx.name,
            branch=ctx.branch,
            process=record.command,
            port=record.port,
            cwd=cwd,
            pid=record.pid,
        )
        if server.key in seen:
            continue
        seen.add(server.key)
        servers.append(server)

    return sort_servers(servers)


def find_servers(
    scanner: ListenerScanner | None = None,
    resolver: CwdResolver | None = None,
    settings: Settings | None = None,
) -> list[ServerEntry]:
    """Discover all running development servers in git repositories.

    Args:
        scanner: Listener source. Defaults to one built from settings.
        resolver: Working directory strategy. Defaults to the platform one.
        settings: User settings. Defaults to built-in defaults.

    Returns:
        Sorted, deduplicated server list

    Raises:
        ScanError: If listening sockets cannot be enumerated
    """
    settings = settings or Settings()
    scanner = scanner or ListenerScanner(
        extra_ports=settings.extra_ports,
        ignore_processes=settings.ignore_processes,
    )
    resolver = resolver or get_cwd_resolver()

    records = scanner.get_listeners()
    if not records:
        return []

    pids = list(dict.fromkeys(r.pid for r in records))
    cwd_map = resolver.resolve(pids)
    debug(f"Resolved {len(cwd_map)}/{len(pids)} working directories")

    dirs = list(dict.fromkeys(cwd_map.values()))
    repo_cache = check_repos(dirs, max_workers=settings.max_workers)
    repo_dirs = [d for d, in_repo in repo_cache.items() if in_repo]
    debug(f"{len(repo_dirs)}/{len(dirs)} directories are git repositories")

    contexts = resolve_contexts(repo_dirs, max_workers=settings.max_workers)

    return correlate(records, cwd_map, repo_cache, contexts)
