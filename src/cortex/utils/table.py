"""Plain-text table helpers."""

from typing import Any, List, Sequence, Tuple


def align_key_value(items: Sequence[Tuple[str, Any]], delimiter: str, padding: int) -> str:
    """Render key/value pairs as two aligned columns.
    
    Each line is the key, the delimiter, then enough spaces that every value
    starts in the same column (at least ``padding`` spaces).
    """
    if not items:
        return ""
        
    width = max(len(key) for key, _ in items)
    lines: List[str] = []
    for key, value in items:
        spacing = " " * (width - len(key) + padding)
        lines.append(f"{key}{delimiter}{spacing}{value}")
    return "\n".join(lines)
