"""
ASCII plotting for training-max trends and per-week loads.

Creates terminal-friendly charts for the CLI.
"""


def create_tm_trend_plot(
    points: list[tuple[int, float]],
    total_weeks: int,
    width: int = 60,
    height: int = 16,
    title: str = "Training Max Trend",
) -> str:
    """
    Create an ASCII plot of training max by program week.

    Args:
        points: (week, tm_kg) pairs; the first point is usually the starting TM
        total_weeks: Program length (x-axis extent)
        width: Plot width in characters
        height: Plot height in lines
        title: Chart title

    Returns:
        ASCII art string
    """
    if not points:
        return "No TM adjustments recorded."

    points = sorted(points)
    tms = [tm for _, tm in points]
    y_min = min(tms) * 0.98
    y_max = max(tms) * 1.02
    y_range = y_max - y_min
    if y_range == 0:
        y_range = 1.0

    x_span = max(total_weeks - 1, 1)
    plot_width = width - 8  # Leave room for y-axis labels
    plot_height = height - 3  # Leave room for x-axis and title

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    def _pos(week: int, tm: float) -> tuple[int, int]:
        x = int(((week - 1) / x_span) * (plot_width - 1))
        y = int(((tm - y_min) / y_range) * (plot_height - 1))
        return max(0, min(plot_width - 1, x)), plot_height - 1 - y

    plot_points = [_pos(week, tm) for week, tm in points]

    # Step line: TM holds until the next adjustment, then jumps
    for (x1, y1), (x2, y2) in zip(plot_points, plot_points[1:]):
        for x in range(x1 + 1, x2):
            if grid[y1][x] == " ":
                grid[y1][x] = "─"
        for r in range(min(y1, y2) + 1, max(y1, y2)):
            if grid[r][x2] == " ":
                grid[r][x2] = "│"

    # Hold the last value to the end of the program
    last_x, last_y = plot_points[-1]
    for x in range(last_x + 1, plot_width):
        grid[last_y][x] = "·"

    for x, y in plot_points:
        grid[y][x] = "●"

    lines = [title, "─" * width]
    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * y_range if plot_height > 1 else y_max
        lines.append(f"{y_val:6.1f} ┤" + "".join(row))
    lines.append("─" * width)

    label_line = [" "] * plot_width
    for week in (1, (total_weeks + 1) // 2, total_weeks):
        x, _ = _pos(week, y_min)
        text = f"W{week}"
        start = min(x, plot_width - len(text))
        for j, c in enumerate(text):
            label_line[start + j] = c
    lines.append(" " * 8 + "".join(label_line))
    lines.append("● TM change   · held")

    return "\n".join(lines)


def create_tm_delta_chart(
    labels: list[str],
    deltas_kg: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a diverging bar chart of signed TM changes.

    Decreases grow left of the axis (``░``), increases grow right of it
    (``█``).  Both halves share one scale, the largest absolute change.
    Any non-zero change gets at least one cell.

    Args:
        labels: Exercise id for each bar
        deltas_kg: Signed TM change for each bar
        width: Total bar width across both halves
        title: Chart title

    Returns:
        ASCII chart string
    """
    if not deltas_kg:
        return "No TM changes to display."

    half = max(width // 2, 1)
    scale = max(abs(d) for d in deltas_kg)
    max_label_len = max(len(l) for l in labels)

    lines = []
    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + 2 * half + 12))

    for label, delta in zip(labels, deltas_kg):
        cells = 0
        if delta and scale > 0:
            cells = max(1, round(abs(delta) / scale * half))
        left = ("░" * cells if delta < 0 else "").rjust(half)
        right = ("█" * cells if delta > 0 else "").ljust(half)
        lines.append(f"{label:>{max_label_len}} {left}│{right} {delta:+.1f} kg")

    return "\n".join(lines)
