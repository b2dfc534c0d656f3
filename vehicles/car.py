# vehicles/car.py
import math
from vehicles.base import PathSample


class Car:
    def __init__(self, length=4.5, width=1.8, velocity=1.0):
        if not velocity > 0:
            raise ValueError(f"velocity must be > 0, got {velocity}")
        self.length = length
        self.width = width
        self.v = velocity   # constant forward speed [m/s]

    def drive(self, segment, dt):
        """
        Move along a fitted clothoid at constant speed.
        segment: ClothoidSegment to follow
        dt:      timestep [s]

        Samples s = v*k*dt while s <= L, then one last sample clamped to s = L
        (t = L/v) unless the time grid already landed on it. Returns a list
        of PathSample with strictly increasing s.
        """
        if not dt > 0:
            raise ValueError(f"dt must be > 0, got {dt}")
        L = segment.length
        ds = self.v * dt
        samples = []
        # Hard cap so the loop terminates even if L/ds is imperfect
        max_steps = int(L / ds) + 2
        for k in range(max_steps):
            s = ds * k
            if s > L:
                break
            x, y, th, kappa = segment.evaluate(s)
            samples.append(PathSample(dt * k, s, x, y, th, kappa))
        if samples[-1].s < L:
            x, y, th, kappa = segment.evaluate(L)
            samples.append(PathSample(L / self.v, L, x, y, th, kappa))
        return samples

    # Oriented rectangle footprint corners (pose is the car center, front is +x)
    def footprint(self, pose, safety_margin=0.0):
        hx = 0.5 * self.length + safety_margin
        hy = 0.5 * self.width + safety_margin
        corners_local = [(hx, hy), (hx, -hy), (-hx, -hy), (-hx, hy)]
        c, s = math.cos(pose.theta), math.sin(pose.theta)
        return [(pose.x + c*px - s*py, pose.y + s*px + c*py) for (px, py) in corners_local]
