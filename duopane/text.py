"""
Terminal text measurement helpers shared by the preview and renderer.
"""
import unicodedata


def cell_width(ch):
    """Return terminal cell width for a single character."""
    if not ch:
        return 0
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in ('W', 'F'):
        return 2
    return 1


def text_width(text):
    return sum(cell_width(ch) for ch in text)


def fit_text_to_cells(text, max_cells, pad=True):
    """Clip/pad text so rendered width does not exceed max_cells."""
    if max_cells <= 0:
        return ''
    out = []
    used = 0
    for ch in text:
        w = cell_width(ch)
        if used + w > max_cells:
            break
        out.append(ch)
        used += w
    if pad and used < max_cells:
        out.append(' ' * (max_cells - used))
    return ''.join(out)


def wrap_cells(text, width):
    """Hard-wrap text into lines no wider than ``width`` terminal cells.

    Existing newlines are kept, tabs expand to four spaces and an empty
    input line stays a single empty line.
    """
    if width <= 0:
        return []
    lines = []
    for raw_line in text.split('\n'):
        line = raw_line.replace('\t', '    ').rstrip('\r')
        if not line:
            lines.append('')
            continue
        current = []
        used = 0
        for ch in line:
            w = cell_width(ch)
            if used + w > width and current:
                lines.append(''.join(current))
                current = []
                used = 0
            current.append(ch)
            used += w
        lines.append(''.join(current))
    return lines


def format_bytes(size):
    """Format a byte count using binary units ("1.5 KB")."""
    unit = 1024
    if size < unit:
        return f'{size} B'
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f'{size / div:.1f} {"KMGTPE"[exp]}B'
