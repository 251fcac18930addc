#!/usr/bin/env python3
"""
SLICE_VOID - Terminal Fruit Slicer
===================================
Toss, slice, don't touch the bombs. Ice freezes your blade.

Controls:
    WASD / arrows - Swing the blade
    P             - Pause / resume
    H             - Home (while paused)
    ENTER / SPACE - Start (menu)
    F             - Toggle FPS display
    Q/ESC         - Quit
"""

import logging
import math
import sys
import time

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .engine import GameRenderer
from .controls import InputHandler, BladeCursor, NameEntry
from .game import GameStateMachine, GamePhase, Snapshot
from .settings import (
    TARGET_FPS, FRAME_TIME, MIN_WIDTH, MIN_HEIGHT,
    LOG_FILE, LOG_LEVEL, LEADERBOARD_MENU_ROWS,
    NEON_CYAN, NEON_MAGENTA, NEON_YELLOW, NEON_GREEN, NEON_RED, NEON_PINK,
    ICE_BLUE, GRAY_MED, GRAY_DARK, GRAY_DARKER, WHITE,
)

logger = logging.getLogger(__name__)

BLADE_COLORS = [WHITE, NEON_GREEN, 70, GRAY_DARK]

TITLE_ART = [
    r"  ___ _    ___ ___ ___  __   _____ ___ ___  ",
    r" / __| |  |_ _/ __| __| \ \ / / _ \_ _|   \ ",
    r" \__ \ |__ | | (__| _|   \ V / (_) | || |) |",
    r" |___/____|___\___|___|   \_/ \___/___|___/ ",
]


# =============================================================================
# UI RENDERING
# =============================================================================

def render_field(renderer: GameRenderer, snap: Snapshot, cursor: BladeCursor = None):
    """Targets, particles and the blade."""
    for view in snap.entities:
        renderer.put_px(view.x, view.y, view.glyph, view.color)
        # Rim marker shows the spin
        rim_x = view.x + math.cos(view.rotation) * view.radius * 0.6
        rim_y = view.y + math.sin(view.rotation) * view.radius * 0.6
        renderer.dot_px(rim_x, rim_y, view.color)

    for p in snap.particles:
        if p.opacity > 0.4:
            renderer.put_px(p.x, p.y, '*' if p.shape == 'star' else 'o', p.color)
        else:
            renderer.dot_px(p.x, p.y, p.color if p.opacity > 0.2 else GRAY_DARK)

    points = snap.blade
    for (x0, y0, _), (x1, y1, life) in zip(points, points[1:]):
        shade = min(len(BLADE_COLORS) - 1, int((1.0 - life) * len(BLADE_COLORS)))
        renderer.line_px(x0, y0, x1, y1, BLADE_COLORS[shade])

    if cursor is not None and snap.phase is GamePhase.PLAYING:
        color = ICE_BLUE if snap.freeze_seconds > 0 else NEON_GREEN
        renderer.put_px(cursor.x, cursor.y, '+', color)


def render_ui(renderer: GameRenderer, snap: Snapshot):
    """The HUD in the bottom 3 rows."""
    ui_y = renderer.game_height
    width = renderer.width

    renderer.put_string(0, ui_y, '=' * width, GRAY_DARK)
    renderer.put_string(2, ui_y, ' SLICE_VOID ', NEON_MAGENTA)
    phase_text = f' {snap.phase.name} '
    renderer.put_string(width - len(phase_text) - 1, ui_y, phase_text, NEON_YELLOW)

    row = ui_y + 1
    renderer.put_string(2, row, f'SCORE: {snap.score:>5}', NEON_YELLOW)
    hearts = '♥' * snap.lives + '♡' * max(0, 3 - snap.lives)
    renderer.put_string(18, row, 'LIVES:', GRAY_MED)
    renderer.put_string(25, row, hearts, NEON_RED)
    if snap.freeze_seconds > 0:
        renderer.put_string(32, row, f'FROZEN {snap.freeze_seconds}s', ICE_BLUE)

    renderer.put_string(2, ui_y + 2, 'WASD/ARROWS:Slice  P:Pause  Q:Quit', GRAY_DARKER)

    if renderer.show_fps:
        fps_text = f'FPS:{renderer.current_fps:.0f}'
        renderer.put_string(width - len(fps_text) - 2, 0, fps_text, GRAY_MED)


def render_leaderboard(renderer: GameRenderer, y: int,
                       entries: list, rows: int):
    renderer.put_centered(y, '- HIGH SCORES -', NEON_PINK)
    if not entries:
        renderer.put_centered(y + 1, 'no scores yet', GRAY_DARK)
        return
    for i, entry in enumerate(entries[:rows]):
        line = f'{i + 1}. {entry.name:<8} {entry.score:>6}  {entry.date}'
        renderer.put_centered(y + 1 + i, line, NEON_YELLOW if i == 0 else GRAY_MED)


def render_title_screen(renderer: GameRenderer, frame: int,
                        entries: list):
    art_y = max(1, renderer.game_height // 2 - 6)
    for i, line in enumerate(TITLE_ART):
        renderer.put_centered(art_y + i, line, NEON_MAGENTA if i % 2 == 0 else NEON_CYAN)

    renderer.put_centered(art_y + len(TITLE_ART) + 1, 'SLICE FRUIT. DODGE BOMBS. MIND THE ICE.', GRAY_MED)
    if (frame // 30) % 2 == 0:
        renderer.put_centered(art_y + len(TITLE_ART) + 3, '[ ENTER - START ]', NEON_GREEN)
    render_leaderboard(renderer, art_y + len(TITLE_ART) + 5, entries, LEADERBOARD_MENU_ROWS)


def render_pause_overlay(renderer: GameRenderer):
    cy = renderer.game_height // 2
    box_w = 40
    renderer.draw_box(renderer.width // 2 - box_w // 2, cy - 3, box_w, 7,
                      NEON_CYAN, '#', with_shake=False)
    renderer.put_centered(cy - 1, '[ PAUSED ]', NEON_CYAN)
    renderer.put_centered(cy + 1, 'P - RESUME    H - HOME    Q - QUIT', GRAY_MED)


def render_freeze_overlay(renderer: GameRenderer, seconds: int):
    renderer.put_centered(renderer.game_height // 3, f'*  FROZEN {seconds}  *', ICE_BLUE)


def render_game_over_screen(renderer: GameRenderer, snap: Snapshot, name: str,
                            frame: int, entries: list):
    cy = max(1, renderer.game_height // 2 - 6)
    renderer.put_centered(cy, 'G A M E   O V E R', NEON_RED)
    renderer.put_centered(cy + 2, f'FINAL SCORE: {snap.score}', NEON_YELLOW)

    cursor = '_' if (frame // 20) % 2 == 0 else ' '
    renderer.put_centered(cy + 4, f'NAME: [{name:<8}]{cursor}', NEON_CYAN)
    renderer.put_centered(cy + 5, 'ENTER - SAVE   TAB - RESTART   ESC - MENU', GRAY_MED)
    render_leaderboard(renderer, cy + 7, entries, len(entries))


# =============================================================================
# APP
# =============================================================================

class GameApp:
    """Terminal frontend: key input in, snapshots out."""

    def __init__(self, term: Terminal):
        self.term = term
        self.renderer = GameRenderer(term)
        width, height = self.renderer.field_size_px()
        self.game = GameStateMachine(width, height)
        self.input_handler = InputHandler()
        self.cursor = BladeCursor(width, height)
        self.name_entry = NameEntry()
        self.running = True
        self.frame = 0
        self.scores = self.game.leaderboard()

    def check_resize(self):
        if (self.term.width, self.term.height) == (self.renderer.width, self.renderer.height):
            return
        self.renderer.resize(self.term.width, self.term.height)
        width, height = self.renderer.field_size_px()
        self.game.resize(width, height)
        self.cursor.resize(width, height)
        print(self.term.home + self.term.clear, end='', flush=True)

    def handle_input(self):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            phase = self.game.phase
            key_str = key.lower() if not key.is_sequence else ''

            if phase is GamePhase.MENU:
                if key.name == 'KEY_ENTER' or key_str == ' ':
                    self._start()
                elif key_str == 'q' or key.name == 'KEY_ESCAPE':
                    self.running = False
            elif phase is GamePhase.PAUSED:
                if key_str == 'p':
                    self.game.resume_game()
                elif key_str == 'h':
                    self.game.go_home()
                elif key_str == 'q':
                    self.running = False
            elif phase is GamePhase.GAME_OVER:
                command = self.name_entry.process_key(key)
                if command == 'submit':
                    self.game.submit_score(self.name_entry.text)
                    if self.game.phase is GamePhase.MENU:
                        self.scores = self.game.leaderboard()
                elif command == 'restart':
                    self._start()
                elif command == 'home':
                    self.game.go_home()
            else:
                self.input_handler.process_key(key)

            key = self.term.inkey(timeout=0)

        for action in self.input_handler.consume_actions():
            if action == 'pause':
                self.game.pause_game()
                self.input_handler.release_all()
            elif action == 'quit':
                self.running = False
            elif action == 'toggle_fps':
                self.renderer.show_fps = not self.renderer.show_fps

    def _start(self):
        self.name_entry = NameEntry()
        self.input_handler.release_all()
        self.game.start_game()

    def update(self):
        """One fixed-rate tick: steer the cursor, then step the game."""
        self.frame += 1
        if self.game.phase is GamePhase.PLAYING:
            self.input_handler.update()
            sample = self.cursor.step(*self.input_handler.get_movement_vector())
            if sample is not None:
                self.game.on_pointer_sample(*sample)

        was_playing = self.game.phase is GamePhase.PLAYING
        self.game.tick()
        if was_playing and self.game.phase is GamePhase.GAME_OVER:
            self.scores = self.game.leaderboard()

    def render(self):
        snap = self.game.snapshot()
        self.renderer.begin_frame(shaking=snap.shaking)

        if snap.phase is GamePhase.MENU:
            render_field(self.renderer, snap)
            render_title_screen(self.renderer, self.frame, self.scores)
        elif snap.phase is GamePhase.GAME_OVER:
            render_game_over_screen(self.renderer, snap, self.name_entry.text,
                                    self.frame, self.scores)
        else:
            render_field(self.renderer, snap, self.cursor)
            if snap.freeze_seconds > 0:
                render_freeze_overlay(self.renderer, snap.freeze_seconds)
            if snap.phase is GamePhase.PAUSED:
                render_pause_overlay(self.renderer)
            render_ui(self.renderer, snap)

        output = self.renderer.end_frame()
        if output:
            print(output, end='', flush=True)


# =============================================================================
# MAIN LOOP
# =============================================================================

def setup_logging():
    """Log to a file; the terminal belongs to the game."""
    logging.basicConfig(
        filename=LOG_FILE,
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )


def main():
    """Entry point. Sets up the terminal and runs the 60 FPS loop."""
    setup_logging()
    term = Terminal()

    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    logger.info('Starting at %dx%d, %d FPS', term.width, term.height, TARGET_FPS)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        app = GameApp(term)

        last_time = time.perf_counter()
        accumulator = 0.0
        fps_timer = 0.0
        fps_frame_count = 0

        print(term.home + term.clear, end='', flush=True)

        while app.running:
            now = time.perf_counter()
            delta = now - last_time
            last_time = now

            # Clamp delta to prevent spiral of death
            delta = min(delta, FRAME_TIME * 5)
            accumulator += delta
            fps_timer += delta

            app.check_resize()
            app.handle_input()

            ticks = 0
            while accumulator >= FRAME_TIME and ticks < 4:
                app.update()
                accumulator -= FRAME_TIME
                ticks += 1
                fps_frame_count += 1

            app.render()

            if fps_timer >= 0.5:
                app.renderer.current_fps = fps_frame_count / fps_timer
                fps_frame_count = 0
                fps_timer = 0.0

            elapsed = time.perf_counter() - now
            sleep_time = FRAME_TIME - elapsed
            if sleep_time > 0.001:
                time.sleep(sleep_time * 0.9)

        print(term.normal, end='', flush=True)

    logger.info('Exited cleanly')


if __name__ == '__main__':
    main()
