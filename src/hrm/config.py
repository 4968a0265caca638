import os
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


# 프로젝트 루트
def _resolve_project_root() -> Path:
    override = os.environ.get("HRM_PROJECT_ROOT")
    if override:
        return Path(override).resolve()
    # Source checkout: <root>/src/hrm/config.py
    return Path(__file__).resolve().parents[2]


PROJECT_ROOT = _resolve_project_root()


def _resolve_programs_dir(project_root: Path) -> Path:
    """Sample programs directory.
    Tries <project_root>/programs, then the current working directory's
    programs/. Falls back to the first candidate when neither exists.
    """
    candidates = [project_root / "programs", Path.cwd() / "programs"]
    for p in candidates:
        if p.is_dir():
            return p
    return candidates[0]


PROGRAMS_DIR = _resolve_programs_dir(PROJECT_ROOT)

# Trace toggles (default off)
DEBUG = _env_flag("HRM_DEBUG")
PARSER_DEBUG = _env_flag("HRM_PARSER_DEBUG")
