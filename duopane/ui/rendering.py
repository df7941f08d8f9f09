"""Frame rendering for duopane."""

import curses
import time

from ..constants import BOTTOM_BARS_HEIGHT, MIN_TERM_HEIGHT, MIN_TERM_WIDTH, PROGRESS_BAR_WIDTH
from ..core.keys import hint_items
from ..core.modes import (
    ConfirmingDeleteMode,
    ConfirmingOverwriteMode,
    CreatingFolderMode,
    PreviewingMode,
)
from ..fileops.engine import OperationMode
from ..fileops.preview import preview_inner_size, visible_lines
from ..text import fit_text_to_cells, format_bytes, text_width
from ..utils import draw_box, safe_addstr

SIZE_COLUMN = 9
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def _box_style(active, use_unicode):
    if not use_unicode:
        return 'ascii'
    return 'double' if active else 'single'


def _tail_fit(text, width):
    """Keep the end of ``text`` (the interesting part of a path) within ``width`` cells."""
    if width <= 0:
        return ''
    if text_width(text) <= width:
        return text
    if width <= 3:
        return '.' * width
    kept = []
    used = 3
    for ch in reversed(text):
        used += text_width(ch)
        if used > width:
            break
        kept.append(ch)
    return '...' + ''.join(reversed(kept))


def format_entry_row(entry, width):
    """Return one listing row: name on the left, size or <DIR> on the right."""
    if width < SIZE_COLUMN + 4:
        return fit_text_to_cells(' ' + entry.name, width)
    if entry.is_parent:
        size = ''
    elif entry.is_dir:
        size = '<DIR>'
    else:
        size = format_bytes(entry.size)
    name = fit_text_to_cells(' ' + entry.name, width - SIZE_COLUMN - 1)
    return name + size.rjust(SIZE_COLUMN)[-SIZE_COLUMN:] + ' '


def _entry_attr(pane, entry, index, theme):
    if index == pane.cursor and pane.active:
        return theme.attr('cursor') | curses.A_BOLD
    if pane.is_selected(entry):
        return theme.attr('selection')
    if entry.is_dir:
        return theme.attr('directory') | curses.A_BOLD
    return theme.attr('file')


def draw_pane(stdscr, pane, x, theme, use_unicode=True):
    """Draw one pane: border, path header and the visible slice of entries."""
    w, h = pane.width, pane.height
    if w < 4 or h < 3:
        return
    border_attr = theme.attr('pane_active' if pane.active else 'pane_inactive')
    if pane.active:
        border_attr |= curses.A_BOLD
    draw_box(stdscr, 0, x, h, w, border_attr, _box_style(pane.active, use_unicode))

    inner_w = w - 2
    safe_addstr(stdscr, 1, x + 1, fit_text_to_cells(_tail_fit(pane.path, inner_w), inner_w), border_attr)

    if pane.error:
        message = fit_text_to_cells(f' Error: {pane.error}', inner_w)
        safe_addstr(stdscr, 2, x + 1, message, theme.attr('error'))
        return

    for row in range(pane.visible_rows):
        index = pane.viewport + row
        y = 2 + row
        if index >= len(pane.entries) or y >= h - 1:
            break
        entry = pane.entries[index]
        safe_addstr(
            stdscr, y, x + 1,
            format_entry_row(entry, inner_w),
            _entry_attr(pane, entry, index, theme),
        )


def draw_preview(stdscr, mode, x, theme, use_unicode=True):
    """Draw the preview box over the active pane's area."""
    w, h = mode.width, mode.height
    if w < 4 or h < 3:
        return
    attr = theme.attr('preview')
    draw_box(stdscr, 0, x, h, w, attr, 'double' if use_unicode else 'ascii')
    for row in range(1, h - 1):
        safe_addstr(stdscr, row, x + 1, ' ' * (w - 2), attr)
    title = fit_text_to_cells(f' {mode.name} ', max(0, w - 4), pad=False)
    safe_addstr(stdscr, 0, x + 2, title, attr | curses.A_BOLD)

    inner_w, inner_h = preview_inner_size(w, h)
    if mode.content is None:
        lines = ['Loading...']
    else:
        lines = visible_lines(mode.lines, mode.scroll, h)
    for i, line in enumerate(lines[:inner_h]):
        safe_addstr(stdscr, 2 + i, x + 3, fit_text_to_cells(line, inner_w, pad=False), attr)


def status_text(controller):
    """Return ``(text, role)`` for the status row in the current mode."""
    mode = controller.mode
    if isinstance(mode, CreatingFolderMode):
        return 'Create folder: ' + mode.buffer, 'prompt_input'
    if isinstance(mode, ConfirmingDeleteMode):
        return f'Delete {mode.target.name}? (y/n)', 'prompt_confirm'
    if isinstance(mode, ConfirmingOverwriteMode):
        conflict = mode.session.current
        if conflict is not None:
            remaining = len(mode.session.conflicts) - 1
            suffix = f' [{remaining} more]' if remaining else ''
            return f'Overwrite {conflict.source.name}? (y/n/A/s){suffix}', 'prompt_overwrite'

    entry = controller.active_pane.current_entry()
    if entry is None:
        return '', 'status'
    stamp = time.strftime(TIMESTAMP_FORMAT, time.localtime(entry.mtime))
    return f'{entry.name} | {entry.mode_string} | {stamp}', 'status'


def draw_status_bar(stdscr, controller, theme, y, width):
    if width <= 0:
        return
    safe_addstr(stdscr, y, 0, ' ' * width, theme.attr('status'))
    text, role = status_text(controller)
    x = 0
    if role == 'status':
        search = controller.active_pane.search
        if search:
            chip = fit_text_to_cells(f' Search: {search} ', width, pad=False)
            safe_addstr(stdscr, y, 0, chip, theme.attr('status_active') | curses.A_BOLD)
            x = text_width(chip)
        attr = theme.attr('status')
    else:
        attr = theme.attr(role) | curses.A_BOLD
    safe_addstr(stdscr, y, x, fit_text_to_cells(' ' + text, max(0, width - x), pad=False), attr)

    if controller.last_error and role == 'status':
        error = f' {controller.last_error} '
        ex = max(x, width - text_width(error))
        safe_addstr(stdscr, y, ex, fit_text_to_cells(error, width - ex, pad=False), theme.attr('error') | curses.A_BOLD)


def draw_hints(stdscr, theme, y, width):
    x = 0
    for hint, label in hint_items():
        chunk = text_width(hint) + text_width(label) + 2
        if x + chunk > width:
            break
        safe_addstr(stdscr, y, x, hint, theme.attr('hint_key') | curses.A_BOLD)
        x += text_width(hint)
        safe_addstr(stdscr, y, x, f' {label} ', theme.attr('hint_desc'))
        x += text_width(label) + 2


def progress_summary(controller, now=None):
    """Return ``(text, fraction)`` for the running operation, or None when idle."""
    request = controller.active_request
    if request is None:
        return None
    verb = 'Moving' if request.mode == OperationMode.MOVE else 'Copying'
    event = controller.progress
    if event is None:
        return f'{verb}...', 0.0

    now = time.monotonic() if now is None else now
    elapsed = now - (controller.operation_started_at or now)
    speed = ''
    if elapsed > 0:
        speed = f'{format_bytes(int(event.bytes_done / elapsed))}/s'
    if event.total_files > 1:
        text = f'{verb} {event.files_done}/{event.total_files} files ({speed}) - {event.current_file}'
    else:
        text = f'{verb} {event.current_file} ({speed})'
    return text, event.fraction


def draw_progress(stdscr, summary, theme, top, width):
    """Draw the progress text and bar right-aligned on two rows; return its width."""
    text, fraction = summary
    block_w = min(max(text_width(text), PROGRESS_BAR_WIDTH) + 1, max(PROGRESS_BAR_WIDTH + 1, width // 2))
    block_w = min(block_w, width)
    x = width - block_w
    line = fit_text_to_cells(text, block_w - 1, pad=False)
    safe_addstr(stdscr, top, width - 1 - text_width(line), line, theme.attr('status') | curses.A_BOLD)

    filled = max(0, min(PROGRESS_BAR_WIDTH, int(fraction * PROGRESS_BAR_WIDTH)))
    bar_x = width - 1 - PROGRESS_BAR_WIDTH
    safe_addstr(stdscr, top + 1, bar_x, ' ' * filled, theme.attr('progress_bar'))
    safe_addstr(stdscr, top + 1, bar_x + filled, ' ' * (PROGRESS_BAR_WIDTH - filled), theme.attr('progress_track'))
    return block_w


def render_frame(stdscr, controller, theme, use_unicode=True):
    """Draw the whole UI from controller state."""
    h, w = stdscr.getmaxyx()
    if w < MIN_TERM_WIDTH or h < MIN_TERM_HEIGHT:
        safe_addstr(stdscr, 0, 0, fit_text_to_cells('Terminal too small', w, pad=False), theme.attr('error'))
        return

    left, right = controller.left, controller.right
    mode = controller.mode
    preview_x = 0 if left.active else left.width
    for pane, x in ((left, 0), (right, left.width)):
        if isinstance(mode, PreviewingMode) and pane.active:
            continue
        draw_pane(stdscr, pane, x, theme, use_unicode)
    if isinstance(mode, PreviewingMode):
        draw_preview(stdscr, mode, preview_x, theme, use_unicode)

    bottom = h - BOTTOM_BARS_HEIGHT
    bars_w = w
    summary = progress_summary(controller)
    if summary is not None:
        bars_w = max(0, w - draw_progress(stdscr, summary, theme, bottom, w))
    draw_status_bar(stdscr, controller, theme, bottom, bars_w)
    draw_hints(stdscr, theme, bottom + 1, bars_w)
