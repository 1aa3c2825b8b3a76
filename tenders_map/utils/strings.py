from typing import Optional


def norm_str(s: Optional[str]) -> Optional[str]:
    if isinstance(s, str):
        s = s.strip()
        return s or None
    return None


def or_default(s: Optional[str], default: str) -> str:
    s = norm_str(s)
    return s if s is not None else default


def safe_filename(name: Optional[str]) -> str:
    # keep the original name readable, only collapse whitespace and path separators
    name = (name or "upload").replace("\\", "/").rsplit("/", 1)[-1]
    return "_".join(name.split()) or "upload"
