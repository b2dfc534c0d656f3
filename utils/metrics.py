# utils/metrics.py
#!/usr/bin/env python3
import argparse, csv, math
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from vehicles.base import PathSample, wrap_angle

SAMPLE_FIELDS = ['t', 's', 'x', 'y', 'theta', 'kappa']


def write_samples(csv_path, samples):
    with open(csv_path, 'w', newline='') as f:
        w = csv.writer(f)
        w.writerow(SAMPLE_FIELDS)
        for p in samples:
            w.writerow([repr(getattr(p, k)) for k in SAMPLE_FIELDS])
    return csv_path


def load_samples(csv_path):
    with open(csv_path, newline='') as f:
        return [PathSample(*(float(row[k]) for k in SAMPLE_FIELDS))
                for row in csv.DictReader(f)]


def end_pose_error(samples, end):
    """(position error [m], heading error [rad] mod 2pi) of the last sample vs `end`."""
    last = samples[-1]
    return (math.hypot(last.x - end.x, last.y - end.y),
            abs(wrap_angle(last.theta - end.theta)))


def plot_profiles(samples, out_path):
    """Heading and curvature against arc length; both should look smooth, kappa linear."""
    s = [p.s for p in samples]
    fig, (ax_th, ax_k) = plt.subplots(2, 1, sharex=True, figsize=(6, 5))
    ax_th.plot(s, [math.degrees(p.theta) for p in samples])
    ax_th.set_ylabel('heading [deg]')
    ax_th.grid(True)
    ax_k.plot(s, [p.kappa for p in samples])
    ax_k.set_ylabel('curvature [1/m]')
    ax_k.set_xlabel('arc length s [m]')
    ax_k.grid(True)
    fig.suptitle('Clothoid profiles')
    fig.tight_layout()
    fig.savefig(out_path)
    plt.close(fig)
    return out_path


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument('csv_path')
    ap.add_argument('--out', default='results/profiles.png')
    args = ap.parse_args(argv)

    samples = load_samples(args.csv_path)
    plot_profiles(samples, args.out)
    print(f"{len(samples)} samples, L = {samples[-1].s:.6f} m -> {args.out}")

if __name__ == '__main__':
    main()
