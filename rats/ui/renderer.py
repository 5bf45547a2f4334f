"""
Renderer - Reads gameplay state and renders to pyunicodegame windows.
This is a THIN ADAPTER - no game logic here.

Each frame starts from a fresh copy of the maze buffer, draws every entity
onto it, then copies a player-centred viewport into the maze window.
"""
from typing import Dict, List, Tuple

import pyunicodegame

from rats.gameplay.game import Game, GamePhase
from rats.gameplay.grid import Direction, UP_LEFT, UP_RIGHT, DOWN_LEFT, DOWN_RIGHT
from rats.gameplay.entities import Entity, Player, Rat, Brat, Factory, Bullet, State


# Visual constants
SCREEN_WIDTH = 80
SCREEN_HEIGHT = 32
HUD_HEIGHT = 2
VIEW_HEIGHT = SCREEN_HEIGHT - HUD_HEIGHT

# Colors
COLOR_BG = (10, 10, 14, 255)
COLOR_WALL = (90, 110, 160)
COLOR_WALL_BOOM = (255, 230, 180)
COLOR_PLAYER = (100, 255, 100)
COLOR_RAT = (200, 150, 110)
COLOR_BRAT = (230, 190, 150)
COLOR_FACTORY = (220, 90, 220)
COLOR_BULLET = (255, 255, 120)
COLOR_EXPLOSION = (255, 140, 60)

COLOR_HUD = (200, 200, 200)
COLOR_HUD_DIM = (120, 120, 130)
COLOR_HP_FULL = (100, 255, 100)
COLOR_HP_EMPTY = (100, 50, 50)
COLOR_BANNER = (255, 100, 100)

# Player quads, top row then bottom row, by facing
PLAYER_GLYPHS = {
    Direction.UP: ('△△', '██'),
    Direction.DOWN: ('██', '▽▽'),
    Direction.LEFT: ('◢█', '◥█'),
    Direction.RIGHT: ('█◣', '█◤'),
}
PLAYER_FACES = {
    Direction.UP: ('▲▲', '██'),
    Direction.DOWN: ('██', '▼▼'),
    Direction.LEFT: ('◀█', '◀█'),
    Direction.RIGHT: ('█▶', '█▶'),
}

FACTORY_GLYPHS = (('╔╗', '╚╝'), ('▛▜', '▙▟'))

RAT_CHARS = ('r', 'R')
BRAT_CHARS = (',', ';')

BULLET_CHARS = {
    Direction.UP: '↑',
    Direction.DOWN: '↓',
    Direction.LEFT: '←',
    Direction.RIGHT: '→',
    UP_LEFT: '↖',
    UP_RIGHT: '↗',
    DOWN_LEFT: '↙',
    DOWN_RIGHT: '↘',
}

EXPLOSION_CHARS = {
    State.EXPLODING1: '*',
    State.EXPLODING2: '✶',
    State.EXPLODING3: '·',
}

PHASE_BANNERS = {
    GamePhase.PAUSED: "PAUSED - P to resume",
    GamePhase.FINISHED: "GAME OVER - R to restart, Esc to quit",
}

Cell = Tuple[str, Tuple[int, int, int]]


class Renderer:
    """
    Renders game state to pyunicodegame windows.

    This class reads from Game but never modifies it.
    """

    def __init__(self, game: Game):
        self.game = game

        # Windows will be created in init_windows()
        self.maze_window = None
        self.hud_window = None

    def init_windows(self):
        """Initialize pyunicodegame windows."""
        self.maze_window = pyunicodegame.create_window(
            "maze", 0, HUD_HEIGHT, SCREEN_WIDTH, VIEW_HEIGHT,
            z_index=0, bg=COLOR_BG
        )
        self.hud_window = pyunicodegame.create_window(
            "hud", 0, 0, SCREEN_WIDTH, HUD_HEIGHT,
            z_index=10, bg=(25, 25, 35, 255), fixed=True
        )

    def render(self):
        """Render entire game state."""
        self.render_maze()
        self.render_hud()

    # =========================================================================
    # MAZE
    # =========================================================================

    def render_maze(self):
        maze = self.game.maze
        frame = maze.working_copy()
        wall_color = COLOR_WALL_BOOM if self.game.super_boom else COLOR_WALL
        colors: Dict[Tuple[int, int], Tuple[int, int, int]] = {}

        for entity in self.game.get_entities():
            for (row, col), (char, color) in self._entity_cells(entity).items():
                row %= maze.rows
                col %= maze.cols
                frame[row][col] = char
                colors[(row, col)] = color

        top, left = self.viewport_origin()
        for y in range(VIEW_HEIGHT):
            row = (top + y) % maze.rows
            for x in range(SCREEN_WIDTH):
                col = (left + x) % maze.cols
                char = frame[row][col]
                self.maze_window.put(x, y, char, colors.get((row, col), wall_color))

        banner = PHASE_BANNERS.get(self.game.phase)
        if banner:
            x = max(0, (SCREEN_WIDTH - len(banner)) // 2)
            self.maze_window.put_string(x, VIEW_HEIGHT // 2, banner, COLOR_BANNER)

    def viewport_origin(self) -> Tuple[int, int]:
        """Top-left maze cell of the view, keeping the player centred."""
        maze = self.game.maze
        pos = self.game.player_position()
        return (pos.row - VIEW_HEIGHT // 2) % maze.rows, (pos.col - SCREEN_WIDTH // 2) % maze.cols

    def _entity_cells(self, entity: Entity) -> Dict[Tuple[int, int], Cell]:
        """Map of (row, col) -> (char, color) an entity covers this frame."""
        row, col = entity.pos.row, entity.pos.col

        if entity.state is State.DEAD:
            return {}
        if entity.state.exploding:
            char = EXPLOSION_CHARS[entity.state]
            if entity.quad:
                return {cell: (char, COLOR_EXPLOSION) for cell in _quad_cells(row, col)}
            return {(row, col): (char, COLOR_EXPLOSION)}

        if isinstance(entity, Player):
            return _quad(row, col, self._player_glyph(entity), COLOR_PLAYER)
        if isinstance(entity, Factory):
            return _quad(row, col, FACTORY_GLYPHS[entity.cycle & 1], COLOR_FACTORY)
        if isinstance(entity, Rat):
            return {(row, col): (RAT_CHARS[entity.cycle & 1], COLOR_RAT)}
        if isinstance(entity, Brat):
            return {(row, col): (BRAT_CHARS[entity.cycle & 1], COLOR_BRAT)}
        if isinstance(entity, Bullet):
            return {(row, col): (BULLET_CHARS.get(entity.dir, '•'), COLOR_BULLET)}
        return {}

    def _player_glyph(self, player: Player) -> Tuple[str, str]:
        facing = player.facing().stop()
        if player.dir.effective() and player.cycle & 2:
            return PLAYER_GLYPHS[facing]
        return PLAYER_FACES[facing]

    # =========================================================================
    # HUD
    # =========================================================================

    def render_hud(self):
        """Render HUD overlay."""
        status = self.game.status()

        # Health bar
        bar_width = 10
        filled = status['health'] * bar_width // 100
        self.hud_window.put_string(1, 0, "HP", COLOR_HUD)
        for i in range(bar_width):
            char = '█' if i < filled else '░'
            color = COLOR_HP_FULL if i < filled else COLOR_HP_EMPTY
            self.hud_window.put(4 + i, 0, char, color)

        counts = status['counts']
        line = (
            f"Lives {status['lives']}  Score {status['score']:>6}  "
            f"Rats {counts['RAT'][0]}  Brats {counts['BRAT'][0]}  "
            f"Factories {counts['FACTORY'][0]}"
        )
        self.hud_window.put_string(16, 0, line.ljust(SCREEN_WIDTH - 16), COLOR_HUD)

        if status['diagnostics']:
            self.hud_window.put_string(0, 1, self.diagnostics_line().ljust(SCREEN_WIDTH), COLOR_HUD_DIM)
        else:
            self.hud_window.put_string(0, 1, ' ' * SCREEN_WIDTH, COLOR_HUD_DIM)

    def diagnostics_line(self) -> str:
        status = self.game.status()
        seconds = status['elapsed_ms'] / 1000.0
        fps = status['frames'] / seconds if seconds else 0.0
        maze = self.game.maze
        top, left = self.viewport_origin()
        return (
            f"FPS: {fps:.0f}  maze: {maze.rows}x{maze.cols}  "
            f"view: r{top},c{left}  player: {self.game.player_position()}"
        )


def _quad_cells(row: int, col: int) -> List[Tuple[int, int]]:
    return [(row, col), (row, col + 1), (row + 1, col), (row + 1, col + 1)]


def _quad(row: int, col: int, glyph: Tuple[str, str], color) -> Dict[Tuple[int, int], Cell]:
    top, bottom = glyph
    return {
        (row, col): (top[0], color),
        (row, col + 1): (top[1], color),
        (row + 1, col): (bottom[0], color),
        (row + 1, col + 1): (bottom[1], color),
    }
