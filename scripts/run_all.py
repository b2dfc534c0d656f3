# run_all.py
import subprocess, sys

def run_sim(outdir="results", velocity=1.0, dt=0.1):
    subprocess.run([
        sys.executable, "-m", "sim.run_clothoid",
        "--velocity", str(velocity),
        "--dt", str(dt),
        "--outdir", outdir,
        "--png", "--gnuplot", "script", "--quiet",
    ], check=True)

def make_plot(outdir="results"):
    subprocess.run([
        sys.executable, "-m", "utils.metrics",
        f"{outdir}/samples.csv",
        "--out", f"{outdir}/profiles.png"
    ], check=True)

if __name__ == "__main__":
    run_sim()
    make_plot()
