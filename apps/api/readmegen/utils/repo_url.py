import re

from readmegen.core.errors import InputError
from readmegen.schemas.readme import RepositoryReference

GITHUB_REPO_RE = re.compile(
    r"^https://github\.com/([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)(?:/|#.*)?$",
    re.IGNORECASE,
)


def parse_repo_url(raw: str) -> RepositoryReference:
    """
    Split a GitHub repo URL into owner/name:
    - trims surrounding whitespace
    - accepts only https://github.com/<owner>/<repo>
    - tolerates a trailing '/' or '#fragment'
    - strips '.git' from the repo name
    """
    s = (raw or "").strip()
    m = GITHUB_REPO_RE.match(s)
    if not m:
        raise InputError()

    owner, name = m.group(1), m.group(2)
    if name.lower().endswith(".git"):
        name = name[:-4]
    if not name:
        raise InputError()

    return RepositoryReference(owner=owner, name=name)
