"""lsrv - list running development servers across git repositories."""

__version__ = "0.3.0"

from .context import RepoContext, check_repos, get_branch, get_repo_name, is_repo, resolve_contexts
from .cwd import CwdResolver, LsofCwdResolver, ProcCwdResolver, get_cwd_resolver
from .detector import ServerEntry, correlate, find_servers, sort_servers
from .project import ProjectType, detect_project_type
from .system import ListenerRecord, ListenerScanner, ScanError, is_dev_port

__all__ = [
    "__version__",
    "RepoContext",
    "check_repos",
    "get_branch",
    "get_repo_name",
    "is_repo",
    "resolve_contexts",
    "CwdResolver",
    "LsofCwdResolver",
    "ProcCwdResolver",
    "get_cwd_resolver",
    "ServerEntry",
    "correlate",
    "find_servers",
    "sort_servers",
    "ProjectType",
    "detect_project_type",
    "ListenerRecord",
    "ListenerScanner",
    "ScanError",
    "is_dev_port",
]
