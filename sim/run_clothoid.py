# sim/run_clothoid.py
#!/usr/bin/env python3
import argparse, math, os, sys

from geom.clothoid import build_g1, FitNonConvergence
from vehicles.base import Pose
from vehicles.car import Car
from utils.metrics import write_samples, end_pose_error
from sim import gnuplot

# Default scenario: gentle S-bend from (2, 0.5) heading NE to (5, 3) heading ESE
DEFAULT_START = (2.0, 0.5, math.pi / 4)
DEFAULT_END = (5.0, 3.0, -math.pi / 6)
DEFAULT_VELOCITY = 1.0   # m/s
DEFAULT_DT = 0.1         # s


def run(start, end, velocity=DEFAULT_VELOCITY, dt=DEFAULT_DT, quiet=False):
    """Fit the clothoid between two poses and drive a car along it. Returns (segment, samples)."""
    segment = build_g1(start.x, start.y, start.theta, end.x, end.y, end.theta)
    print(f"clothoid: L={segment.length:.6f} kappa0={segment.kappa0:.6f} "
          f"dkappa={segment.dkappa:.6f} ({segment.iterations} iterations)")

    car = Car(velocity=velocity)
    samples = car.drive(segment, dt)
    if not quiet:
        for p in samples:
            print(f" | s:{p.s:.4f} | theta:{p.theta:.6f} | kappa:{p.kappa:.6f} "
                  f"| x:{p.x:.6f} | y:{p.y:.6f}")
            print(f"Time: {p.t:.2f} | Position: ({p.x:.4f}, {p.y:.4f}) "
                  f"| Heading: {math.degrees(p.theta):.2f}°")
    return segment, samples


def main(argv=None):
    ap = argparse.ArgumentParser(description="Fit a G1 clothoid and simulate a car driving it.")
    ap.add_argument('--start', type=float, nargs=3, default=DEFAULT_START, metavar=('X', 'Y', 'THETA'))
    ap.add_argument('--end', type=float, nargs=3, default=DEFAULT_END, metavar=('X', 'Y', 'THETA'))
    ap.add_argument('--velocity', type=float, default=DEFAULT_VELOCITY)
    ap.add_argument('--dt', type=float, default=DEFAULT_DT)
    ap.add_argument('--outdir', type=str, default='results')
    ap.add_argument('--png', action='store_true', help='save a matplotlib path plot')
    ap.add_argument('--gif', action='store_true', help='save an animated GIF of the car')
    ap.add_argument('--gnuplot', choices=('none', 'script', 'interactive'), default='none')
    ap.add_argument('--quiet', action='store_true', help='skip per-sample lines')
    args = ap.parse_args(argv)

    if args.velocity <= 0 or args.dt <= 0:
        ap.error("--velocity and --dt must be positive")

    start, end = Pose(*args.start), Pose(*args.end)
    try:
        segment, samples = run(start, end, args.velocity, args.dt, args.quiet)
    except FitNonConvergence as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    os.makedirs(args.outdir, exist_ok=True)
    csv_path = write_samples(os.path.join(args.outdir, 'samples.csv'), samples)
    pos_err, th_err = end_pose_error(samples, end)
    print(f"{len(samples)} samples -> {csv_path}")
    print(f"end pose error: position {pos_err:.3e} m, heading {th_err:.3e} rad")

    car = Car(velocity=args.velocity)
    if args.png:
        from sim.animate import save_path_png
        print("saved", save_path_png(samples, start, end, os.path.join(args.outdir, 'clothoid_sim.png'), car=car))
    if args.gif:
        from sim.animate import save_gif_frames
        print("saved", save_gif_frames(samples, start, end, os.path.join(args.outdir, 'clothoid_sim.gif'),
                                       stride=2, car=car))

    if args.gnuplot == 'script':
        out = gnuplot.write_gnuplot_script(samples, start, end, os.path.join(args.outdir, 'clothoid_sim.gp'),
                                           image=os.path.join(args.outdir, 'clothoid_sim_gnuplot.png'))
        print("saved", out)
    elif args.gnuplot == 'interactive':
        try:
            gnuplot.plot_interactive(samples, start, end)
        except OSError as e:
            print(f"Error: Could not open Gnuplot ({e})", file=sys.stderr)
            return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
