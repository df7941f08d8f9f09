"""
File preview generation logic.
"""
import codecs
import os

from ..constants import PREVIEW_H_OVERHEAD, PREVIEW_MAX_BYTES, PREVIEW_V_OVERHEAD
from ..text import wrap_cells


def _decode_text(raw, final):
    """Decode UTF-8, or return None when the bytes do not look like text."""
    if b'\x00' in raw:
        return None
    decoder = codecs.getincrementaldecoder('utf-8')()
    try:
        # A truncated read may end mid-character; final=False tolerates that.
        return decoder.decode(raw, final=final)
    except UnicodeDecodeError:
        return None


def load_preview(path, max_bytes=PREVIEW_MAX_BYTES):
    """Return preview text for the file at ``path``.

    Binary files get a one-line placeholder; files larger than ``max_bytes``
    get a truncation notice followed by their first ``max_bytes`` bytes.
    Raises ``OSError`` when the file cannot be read.
    """
    name = os.path.basename(path)
    with open(path, 'rb') as stream:
        raw = stream.read(max_bytes + 1)
    truncated = len(raw) > max_bytes
    if truncated:
        raw = raw[:max_bytes]

    text = _decode_text(raw, final=not truncated)
    if text is None:
        return f'--- Binary file: {name} ---'
    text = text.replace('\r\n', '\n')
    if truncated:
        return (
            f'--- File too large for preview ({name}), '
            f'showing first {max_bytes} bytes ---\n{text}'
        )
    return text


def preview_inner_size(width, height):
    """Return usable text (columns, rows) inside a preview box."""
    return max(0, width - PREVIEW_H_OVERHEAD), max(0, height - PREVIEW_V_OVERHEAD)


def wrapped_lines(content, width):
    if not content:
        return []
    return wrap_cells(content, width)


def max_scroll(lines, height):
    _, inner_h = preview_inner_size(0, height)
    return max(0, len(lines) - inner_h)


def clamp_scroll(scroll, lines, height):
    return max(0, min(scroll, max_scroll(lines, height)))


def visible_lines(lines, scroll, height):
    """Return the slice of already-wrapped ``lines`` shown at ``scroll``."""
    _, inner_h = preview_inner_size(0, height)
    start = clamp_scroll(scroll, lines, height)
    return lines[start:start + inner_h]
