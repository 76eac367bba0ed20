"""Bingo board image renderer."""

import logging
import textwrap
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from goal_bingo.board.goals import habit_days_in_month
from goal_bingo.board.lines import Line, completed_lines
from goal_bingo.board.models import Board, Goal, GoalType

logger = logging.getLogger(__name__)


class BoardRenderer:
    """Renders a bingo board to a monochrome image."""

    def __init__(self, output_dir: str = "static/images"):
        """
        Initialize renderer.

        Args:
            output_dir: Directory to save generated images
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Try to load fonts, fall back to default
        self.fonts = self._load_fonts()

    def _load_fonts(self) -> dict:
        """Load fonts for rendering."""
        fonts = {}

        # Try to find system fonts
        font_paths = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "/System/Library/Fonts/Helvetica.ttc",  # macOS
        ]

        try:
            for path in font_paths:
                if Path(path).exists():
                    fonts["header"] = ImageFont.truetype(path, 24)
                    fonts["title"] = ImageFont.truetype(path, 16)
                    fonts["normal"] = ImageFont.truetype(path, 16)
                    fonts["small"] = ImageFont.truetype(path, 12)
                    logger.info(f"Loaded fonts from {path}")
                    break
        except OSError as e:
            logger.warning(f"Could not load TrueType fonts: {e}, using default")
            fonts = {}

        # Fall back to default fonts
        if not fonts:
            default_font = ImageFont.load_default()
            fonts["header"] = default_font
            fonts["title"] = default_font
            fonts["normal"] = default_font
            fonts["small"] = default_font

        return fonts

    def render(
        self,
        board: Board,
        today: Optional[date] = None,
        width: int = 800,
        height: int = 480,
    ) -> tuple[str, str]:
        """
        Render the board.

        Args:
            board: Board to draw
            today: Month used for habit summaries (defaults to today)
            width: Image width
            height: Image height

        Returns:
            Tuple of (filename, file_path)
        """
        today = today or date.today()
        logger.info(f"Rendering {board.size}x{board.size} board for {board.user_name}")

        image = Image.new("RGB", (width, height), "white")
        draw = ImageDraw.Draw(image)

        # Grid is a square between header and footer
        grid_top = 60
        grid_size = height - grid_top - 60
        grid_left = (width - grid_size) // 2
        cell_size = grid_size // board.size

        self._draw_header(draw, board, width)
        self._draw_grid(draw, board, grid_left, grid_top, cell_size, today)
        self._draw_lines(draw, board, grid_left, grid_top, cell_size)
        self._draw_footer(draw, board, width, height)

        # Convert to monochrome
        image = self._convert_to_monochrome(image)

        # Save
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        filename = f"board-{timestamp}"
        file_path = self.output_dir / f"{filename}.png"

        image.save(file_path, "PNG")
        logger.info(f"Saved board to {file_path}")

        return filename, str(file_path)

    def _draw_header(self, draw: ImageDraw, board: Board, width: int):
        """Draw header with the owner and line count."""
        draw.text((20, 15), f"{board.user_name}'s BINGO", fill="black", font=self.fonts["header"])

        lines_text = f"Lines: {board.completed_lines}/{board.target_bingo_lines}"

        # Right-align line count
        bbox = draw.textbbox((0, 0), lines_text, font=self.fonts["normal"])
        text_width = bbox[2] - bbox[0]
        draw.text((width - text_width - 20, 20), lines_text, fill="black", font=self.fonts["normal"])

        # Divider line
        draw.line([20, 50, width - 20, 50], fill="black", width=2)

    def _draw_grid(
        self,
        draw: ImageDraw,
        board: Board,
        left: int,
        top: int,
        cell_size: int,
        today: date,
    ):
        """Draw every cell."""
        for index, goal in enumerate(board.goals):
            row, col = board.cell(index)
            x = left + col * cell_size
            y = top + row * cell_size
            self._draw_cell(draw, goal, x, y, cell_size, today)

    def _draw_cell(self, draw: ImageDraw, goal: Goal, x: int, y: int, size: int, today: date):
        """Draw a single goal; completed goals are filled black."""
        padding = 6
        fill = "black" if goal.is_completed else "white"
        text_fill = "white" if goal.is_completed else "black"

        draw.rectangle([x, y, x + size, y + size], fill=fill, outline="black", width=2)

        title = goal.title or "+"
        wrapped = textwrap.wrap(title, width=max(8, size // 10))[:4]
        text_y = y + padding
        for part in wrapped:
            draw.text((x + padding, text_y), part, fill=text_fill, font=self.fonts["title"])
            text_y += 18

        progress_text = self._progress_text(goal, today)
        if progress_text:
            draw.text(
                (x + padding, y + size - padding - 14),
                progress_text,
                fill=text_fill,
                font=self.fonts["small"],
            )

    def _progress_text(self, goal: Goal, today: date) -> Optional[str]:
        """Short progress summary under the title."""
        if goal.type == GoalType.COUNT:
            return f"{goal.current_count}/{goal.target_count}"

        if goal.type == GoalType.HABIT:
            days = habit_days_in_month(goal, today.year, today.month)
            return f"{days} days in {today.strftime('%b')}"

        return None

    def _draw_lines(self, draw: ImageDraw, board: Board, left: int, top: int, cell_size: int):
        """Strike through completed bingo lines."""
        flags = [goal.is_completed for goal in board.goals]

        for line in completed_lines(board.size, flags):
            start, end = self._line_endpoints(board, line, left, top, cell_size)

            # White core over a black edge so it shows on filled cells
            draw.line([start, end], fill="black", width=8)
            draw.line([start, end], fill="white", width=3)

    def _line_endpoints(
        self, board: Board, line: Line, left: int, top: int, cell_size: int
    ) -> tuple[tuple[int, int], tuple[int, int]]:
        """Centers of the first and last cell of a line."""
        half = cell_size // 2

        def center(index: int) -> tuple[int, int]:
            row, col = board.cell(index)
            return left + col * cell_size + half, top + row * cell_size + half

        return center(line.indices[0]), center(line.indices[-1])

    def _draw_footer(self, draw: ImageDraw, board: Board, width: int, height: int):
        """Draw footer with summary stats."""
        y = height - 35

        # Divider line
        draw.line([20, y - 10, width - 20, y - 10], fill="black", width=2)

        done = sum(1 for goal in board.goals if goal.is_completed)
        total = len(board.goals)

        if total > 0:
            percentage = int((done / total) * 100)
            summary_text = f"Goals: {done}/{total} ({percentage}%)"
        else:
            summary_text = "Goals: none"

        if board.completed_lines >= board.target_bingo_lines:
            summary_text += "  - Bingo goal reached!"

        draw.text((20, y), summary_text, fill="black", font=self.fonts["normal"])

        # Last update time
        time_text = f"Last update: {datetime.now().strftime('%H:%M')}"
        bbox = draw.textbbox((0, 0), time_text, font=self.fonts["small"])
        text_width = bbox[2] - bbox[0]
        draw.text((width - text_width - 20, y + 2), time_text, fill="black", font=self.fonts["small"])

    def _convert_to_monochrome(self, image: Image) -> Image:
        """Convert image to monochrome for e-ink display."""
        return image.convert("1")
