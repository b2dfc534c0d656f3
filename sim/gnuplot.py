# sim/gnuplot.py
"""
Hand a sampled path to gnuplot: green path line, blue start, red end.

Data goes inline ('-' blocks closed by 'e'), one "x y" pair per line, so the
script can either be saved to a file or piped straight into gnuplot.
"""
import subprocess

PNG_TERMINAL = "set term pngcairo size 1280,960"
GNUPLOT_CMD = ["gnuplot", "-persist"]


def gnuplot_script(path, start, end, output=None):
    """
    Build the gnuplot commands for one run.

    Args:
        path: sequence of samples/poses exposing .x and .y
        start, end: Pose of the two fitted endpoints
        output: PNG filename; None keeps gnuplot's interactive terminal
    Returns:
        the script as a single string
    """
    lines = []
    if output is not None:
        lines.append(PNG_TERMINAL)
        lines.append(f"set output '{output}'")
    lines += [
        "set grid",
        "set size ratio -1",
        "plot '-' with lines lc 'green' title 'Path', "
        "'-' with points pt 7 ps 2 lc 'blue' title 'Start', "
        "'-' with points pt 7 ps 2 lc 'red' title 'End'",
    ]
    lines += [f"{p.x:f} {p.y:f}" for p in path]
    lines.append("e")
    lines.append(f"{start.x:f} {start.y:f}")
    lines.append("e")
    lines.append(f"{end.x:f} {end.y:f}")
    lines.append("e")
    return "\n".join(lines) + "\n"


def write_gnuplot_script(path, start, end, out_path, image="clothoid_sim.png"):
    with open(out_path, "w") as f:
        f.write(gnuplot_script(path, start, end, output=image))
    return out_path


def plot_interactive(path, start, end):
    """Pipe the script into a persistent gnuplot window (needs gnuplot on PATH)."""
    proc = subprocess.Popen(GNUPLOT_CMD, stdin=subprocess.PIPE, text=True)
    proc.communicate(gnuplot_script(path, start, end))
    return proc.returncode
