"""
Maze generation and wall queries.
NO UI DEPENDENCIES.

A maze is a torus of cells. Each cell owns two walls: the one along its top
edge and the one along its left edge. Generation carves a spanning tree with
hunt-and-kill, punches extra openings according to density, then rasterizes
the walls into a buffer of box-drawing characters.
"""
import logging
import random
from typing import List, Optional, Sequence, Tuple

from .grid import Dimensions, Direction, CARDINALS
from .constants import MAZE_CELL_ROWS, MAZE_CELL_COLS, MIN_MAZE_CELLS

logger = logging.getLogger(__name__)

OPEN = ' '
HORIZONTAL = '─'
VERTICAL = '│'

# Corner glyphs indexed by arm bits: left=8, right=4, down=2, up=1
JUNCTIONS = (
    ' ', '╵', '╷', '│',
    '╶', '└', '┌', '├',
    '╴', '┘', '┐', '┤',
    '─', '┴', '┬', '┼',
)


class Maze:
    """
    Wall buffer plus dimensions.

    Coordinate system:
    - (0, 0) is top-left
    - row increases downward, col increases to the right
    - every query wraps around both axes
    """

    def __init__(self, cell_rows: int, cell_cols: int):
        if cell_rows < MIN_MAZE_CELLS or cell_cols < MIN_MAZE_CELLS:
            raise ValueError(
                f"maze needs at least {MIN_MAZE_CELLS}x{MIN_MAZE_CELLS} cells, "
                f"got {cell_rows}x{cell_cols}"
            )
        self.cell_rows = cell_rows
        self.cell_cols = cell_cols
        self.dimensions = Dimensions(cell_rows * MAZE_CELL_ROWS, cell_cols * MAZE_CELL_COLS)

        # Every wall starts standing
        self.top_walls: List[List[bool]] = [[True] * cell_cols for _ in range(cell_rows)]
        self.left_walls: List[List[bool]] = [[True] * cell_cols for _ in range(cell_rows)]
        self._buffer: List[List[str]] = []
        self._rasterize()

    @classmethod
    def from_text(cls, lines: Sequence[str]) -> 'Maze':
        """
        Build a maze from a fixed character layout.
        Any character other than a space is a wall. Cell wall flags are left
        unset since the layout does not have to follow the cell grid.
        """
        if not lines or not lines[0]:
            raise ValueError("maze layout must not be empty")
        width = len(lines[0])
        if any(len(line) != width for line in lines):
            raise ValueError("maze layout rows must all have the same width")

        maze = cls.__new__(cls)
        maze.cell_rows = 0
        maze.cell_cols = 0
        maze.dimensions = Dimensions(len(lines), width)
        maze.top_walls = []
        maze.left_walls = []
        maze._buffer = [list(line) for line in lines]
        return maze

    @property
    def rows(self) -> int:
        return self.dimensions.rows

    @property
    def cols(self) -> int:
        return self.dimensions.cols

    # =========================================================================
    # GENERATION
    # =========================================================================

    def generate(self, density: int, rng: Optional[random.Random] = None) -> None:
        """
        Carve a new maze. Each call is a fresh random draw.

        density is the percentage of spanning-tree walls kept: 100 leaves a
        perfect maze, 0 clears every wall.
        """
        if not 0 <= density <= 100:
            raise ValueError(f"density must be between 0 and 100, got {density}")
        rng = rng if rng is not None else random.Random()

        self.top_walls = [[True] * self.cell_cols for _ in range(self.cell_rows)]
        self.left_walls = [[True] * self.cell_cols for _ in range(self.cell_rows)]
        self._hunt_and_kill(rng)
        self._clear_walls(density, rng)
        self._rasterize()
        logger.debug(
            f"Generated {self.cell_rows}x{self.cell_cols} maze "
            f"(density {density}, {self.openings()} openings)"
        )

    def _neighbor(self, row: int, col: int, direction: Direction) -> Tuple[int, int]:
        if direction == Direction.UP:
            return (row - 1) % self.cell_rows, col
        if direction == Direction.DOWN:
            return (row + 1) % self.cell_rows, col
        if direction == Direction.LEFT:
            return row, (col - 1) % self.cell_cols
        return row, (col + 1) % self.cell_cols

    def _carve(self, row: int, col: int, direction: Direction) -> None:
        """Remove the wall between a cell and its neighbor in direction."""
        nrow, ncol = self._neighbor(row, col, direction)
        if direction == Direction.UP:
            self.top_walls[row][col] = False
        elif direction == Direction.DOWN:
            self.top_walls[nrow][ncol] = False
        elif direction == Direction.LEFT:
            self.left_walls[row][col] = False
        else:
            self.left_walls[nrow][ncol] = False

    def _seen(self, visited: List[List[bool]], row: int, col: int, direction: Direction) -> bool:
        nrow, ncol = self._neighbor(row, col, direction)
        return visited[nrow][ncol]

    def _hunt_and_kill(self, rng: random.Random) -> None:
        visited = [[False] * self.cell_cols for _ in range(self.cell_rows)]
        row = rng.randrange(self.cell_rows)
        col = rng.randrange(self.cell_cols)
        visited[row][col] = True
        remaining = self.cell_rows * self.cell_cols - 1

        while remaining > 0:
            # Kill: random walk into unvisited cells
            options = [d for d in CARDINALS if not self._seen(visited, row, col, d)]
            if options:
                direction = rng.choice(options)
                self._carve(row, col, direction)
                row, col = self._neighbor(row, col, direction)
                visited[row][col] = True
                remaining -= 1
                continue

            # Hunt: first unvisited cell bordering the visited region
            row, col = self._hunt(visited, rng)
            visited[row][col] = True
            remaining -= 1

    def _hunt(self, visited: List[List[bool]], rng: random.Random) -> Tuple[int, int]:
        for row in range(self.cell_rows):
            for col in range(self.cell_cols):
                if visited[row][col]:
                    continue
                links = [d for d in CARDINALS if self._seen(visited, row, col, d)]
                if links:
                    self._carve(row, col, rng.choice(links))
                    return row, col
        raise RuntimeError("hunt found no unvisited cell next to the visited region")

    def _clear_walls(self, density: int, rng: random.Random) -> None:
        for row in range(self.cell_rows):
            for col in range(self.cell_cols):
                if rng.randrange(100) >= density:
                    self.top_walls[row][col] = False
                    self.left_walls[row][col] = False

    def _rasterize(self) -> None:
        rows, cols = self.dimensions.rows, self.dimensions.cols
        buffer = [[OPEN] * cols for _ in range(rows)]
        for row in range(self.cell_rows):
            for col in range(self.cell_cols):
                top = self.top_walls[row][col]
                left = self.left_walls[row][col]
                base_row = row * MAZE_CELL_ROWS
                base_col = col * MAZE_CELL_COLS
                if top:
                    for k in range(1, MAZE_CELL_COLS):
                        buffer[base_row][base_col + k] = HORIZONTAL
                if left:
                    for k in range(1, MAZE_CELL_ROWS):
                        buffer[base_row + k][base_col] = VERTICAL
                left_arm = self.top_walls[row][(col - 1) % self.cell_cols]
                up_arm = self.left_walls[(row - 1) % self.cell_rows][col]
                index = (left_arm << 3) | (top << 2) | (left << 1) | up_arm
                buffer[base_row][base_col] = JUNCTIONS[index]
        self._buffer = buffer

    # =========================================================================
    # QUERIES
    # =========================================================================

    def is_wall(self, row: int, col: int) -> bool:
        """Check if the character cell at (row, col) is a wall."""
        return self._buffer[row % self.rows][col % self.cols] != OPEN

    def is_wall_quad(self, row: int, col: int) -> bool:
        """Check if any cell of the 2x2 block at (row, col) is a wall."""
        return (
            self.is_wall(row, col)
            or self.is_wall(row, col + 1)
            or self.is_wall(row + 1, col)
            or self.is_wall(row + 1, col + 1)
        )

    def char_at(self, row: int, col: int) -> str:
        return self._buffer[row % self.rows][col % self.cols]

    def cell_walls(self, row: int, col: int) -> Tuple[bool, bool]:
        """Get (top, left) wall flags of a maze cell."""
        return self.top_walls[row][col], self.left_walls[row][col]

    def openings(self) -> int:
        """Number of cleared walls between cells."""
        total = 2 * self.cell_rows * self.cell_cols
        standing = sum(sum(r) for r in self.top_walls) + sum(sum(r) for r in self.left_walls)
        return total - standing

    def working_copy(self) -> List[List[str]]:
        """Fresh copy of the wall buffer for a renderer to draw entities onto."""
        return [list(row) for row in self._buffer]

    def lines(self) -> List[str]:
        return [''.join(row) for row in self._buffer]

    def __repr__(self) -> str:
        return f"Maze({self.cell_rows}x{self.cell_cols} cells, {self.rows}x{self.cols} chars)"
