# geom/fresnel.py
"""
Fresnel integrals and the generalized Fresnel momenta behind the clothoid.

    C(t) = int_0^t cos(pi/2 u^2) du        S(t) = int_0^t sin(pi/2 u^2) du

    X_k(a, b, c) = int_0^1 t^k cos(a/2 t^2 + b t + c) dt
    Y_k(a, b, c) = int_0^1 t^k sin(a/2 t^2 + b t + c) dt

A clothoid starting at the origin with heading c, curvature b/L and
curvature rate a/L^2 ends at L * (X_0, Y_0). Every routine here is a pure
function of its arguments.
"""
import cmath
import math
import sys

# ========================
# Configuration
# ========================

SERIES_CROSSOVER = 1.5            # |t| below -> power series, above -> continued fraction
FRESNEL_EPS = sys.float_info.epsilon
FRESNEL_MAX_ITERS = 200
LENTZ_TINY = 1e-300               # stands in for a zero denominator in Lentz's method

A_SMALL_THRESHOLD = 0.01          # |a| below -> Taylor expansion in a
A_SERIES_TERMS = 3                # terms kept in that expansion
B_SMALL_THRESHOLD = 1e-3          # |b| below -> Taylor for sin(b)/b, (1-cos(b))/b

MAX_MOMENTA = 3


def _fresnel_series(x):
    """Power series, interleaving the C and S terms. x > 0."""
    fact = 0.5 * math.pi * x * x
    term = x                      # x (pi x^2/2)^k / k!
    c, s = x, 0.0
    for k in range(1, FRESNEL_MAX_ITERS):
        term *= fact / k
        part = term / (2 * k + 1)
        if (k // 2) % 2:
            part = -part
        if k % 2:
            s += part
        else:
            c += part
        if k > 1 and term <= FRESNEL_EPS * min(c, s):
            break
    return c, s


def _fresnel_continued_fraction(x):
    """
    C + iS = (1+i)/2 * erf(z) with z = sqrt(pi)/2 (1-i) x, erfc(z) taken from
    its continued fraction (modified Lentz). x >= SERIES_CROSSOVER.
    """
    pix2 = math.pi * x * x
    b = complex(1.0, -pix2)
    cc = complex(1.0 / LENTZ_TINY, 0.0)
    d = h = 1.0 / b
    n = -1
    for _ in range(FRESNEL_MAX_ITERS):
        n += 2
        a = -n * (n + 1)
        b += 4.0
        d = 1.0 / (a * d + b)
        cc = b + a / cc
        step = cc * d
        h *= step
        if abs(step.real - 1.0) + abs(step.imag) < FRESNEL_EPS:
            break
    h *= complex(x, -x)
    cs = complex(0.5, 0.5) * (1.0 - cmath.exp(0.5j * pix2) * h)
    return cs.real, cs.imag


def fresnel(t):
    """
    Normalized Fresnel integrals (C(t), S(t)) for any real t.
    Both are odd functions and tend to 1/2 as t -> +inf.
    """
    ax = abs(t)
    if ax == 0.0:
        return 0.0, 0.0
    if ax < SERIES_CROSSOVER:
        c, s = _fresnel_series(ax)
    else:
        c, s = _fresnel_continued_fraction(ax)
    if t < 0:
        return -c, -s
    return c, s


def fresnel_momenta(nk, t):
    """
    Momenta int_0^t u^k cos(pi/2 u^2) du (and sine) for k = 0 .. nk-1.
    Returns two lists of length nk; nk must be 1, 2 or 3.
    """
    if not 1 <= nk <= MAX_MOMENTA:
        raise ValueError(f"nk must be in [1, {MAX_MOMENTA}], got {nk}")
    c0, s0 = fresnel(t)
    C, S = [c0], [s0]
    if nk > 1:
        tt = 0.5 * math.pi * t * t
        ss, cc = math.sin(tt), math.cos(tt)
        C.append(ss / math.pi)
        S.append((1.0 - cc) / math.pi)
        if nk > 2:
            C.append((t * ss - s0) / math.pi)
            S.append((c0 - t * cc) / math.pi)
    return C, S


def _xy_series(k, b):
    """X_k, Y_k for a = c = 0 from the Taylor series of cos(bt), sin(bt)."""
    b2 = b * b
    term = 1.0                    # (-1)^n b^(2n) / (2n)!
    x_sum = y_sum = 0.0
    for n in range(FRESNEL_MAX_ITERS):
        dx = term / (k + 2 * n + 1)
        dy = term * b / ((2 * n + 1) * (k + 2 * n + 2))
        x_sum += dx
        y_sum += dy
        if abs(dx) + abs(dy) <= FRESNEL_EPS * (abs(x_sum) + abs(y_sum)):
            break
        term *= -b2 / ((2 * n + 1) * (2 * n + 2))
    return x_sum, y_sum


def _xy_a_zero(nk, b):
    """X_k, Y_k for a = 0, c = 0, k = 0 .. nk-1."""
    sb, cb = math.sin(b), math.cos(b)
    b2 = b * b
    X = [0.0] * nk
    Y = [0.0] * nk
    if abs(b) < B_SMALL_THRESHOLD:
        X[0] = 1 - (b2 / 6) * (1 - (b2 / 20) * (1 - b2 / 42))
        Y[0] = (b / 2) * (1 - (b2 / 12) * (1 - b2 / 30))
    else:
        X[0] = sb / b
        Y[0] = (1 - cb) / b
    # upward recurrence only while k stays below ~2|b|, where it is stable
    m = min(max(int(math.floor(2 * abs(b))), 1), nk)
    for k in range(1, m):
        X[k] = (sb - k * Y[k - 1]) / b
        Y[k] = (k * X[k - 1] - cb) / b
    for k in range(m, nk):
        X[k], Y[k] = _xy_series(k, b)
    return X, Y


def _xy_a_small(nk, a, b):
    """Expansion of cos/sin(a/2 t^2) around a = 0 on top of the a = 0 momenta."""
    X0, Y0 = _xy_a_zero(nk + 4 * A_SERIES_TERMS + 2, b)
    aa = -a * a / 4
    X, Y = [], []
    for k in range(nk):
        x = X0[k] - (a / 2) * Y0[k + 2]
        y = Y0[k] + (a / 2) * X0[k + 2]
        t = 1.0
        for n in range(1, A_SERIES_TERMS + 1):
            t *= aa / (2 * n * (2 * n - 1))
            bf = a / (4 * n + 2)
            j = 4 * n + k
            x += t * (X0[j] - bf * Y0[j + 2])
            y += t * (Y0[j] + bf * X0[j + 2])
        X.append(x)
        Y.append(y)
    return X, Y


def _xy_a_large(nk, a, b):
    """Complete the square and map onto plain Fresnel momenta."""
    s = 1.0 if a > 0 else -1.0
    absa = abs(a)
    z = math.sqrt(absa / math.pi)
    ell = s * b / math.sqrt(math.pi * absa)
    g = -0.5 * s * b * b / absa
    cg = math.cos(g) / z
    sg = math.sin(g) / z

    Cl, Sl = fresnel_momenta(nk, ell)
    Cz, Sz = fresnel_momenta(nk, ell + z)

    dC0 = Cz[0] - Cl[0]
    dS0 = Sz[0] - Sl[0]
    X = [cg * dC0 - s * sg * dS0]
    Y = [sg * dC0 + s * cg * dS0]
    if nk > 1:
        cg /= z
        sg /= z
        dC1 = Cz[1] - Cl[1]
        dS1 = Sz[1] - Sl[1]
        DC = dC1 - ell * dC0
        DS = dS1 - ell * dS0
        X.append(cg * DC - s * sg * DS)
        Y.append(sg * DC + s * cg * DS)
        if nk > 2:
            cg /= z
            sg /= z
            dC2 = Cz[2] - Cl[2]
            dS2 = Sz[2] - Sl[2]
            DC = dC2 + ell * (ell * dC0 - 2 * dC1)
            DS = dS2 + ell * (ell * dS0 - 2 * dS1)
            X.append(cg * DC - s * sg * DS)
            Y.append(sg * DC + s * cg * DS)
    return X, Y


def generalized_fresnel_cs(nk, a, b, c):
    """
    Generalized Fresnel integrals X_k(a, b, c), Y_k(a, b, c), k = 0 .. nk-1.

    Args:
        nk: number of momenta (1 to 3).
        a:  twice the quadratic phase coefficient (curvature rate * L^2).
        b:  linear phase coefficient (initial curvature * L).
        c:  constant phase (initial heading).

    Returns:
        (X, Y) lists of length nk.
    """
    if not 1 <= nk <= MAX_MOMENTA:
        raise ValueError(f"nk must be in [1, {MAX_MOMENTA}], got {nk}")
    if abs(a) < A_SMALL_THRESHOLD:
        X, Y = _xy_a_small(nk, a, b)
    else:
        X, Y = _xy_a_large(nk, a, b)
    cc, ss = math.cos(c), math.sin(c)
    return ([x * cc - y * ss for x, y in zip(X, Y)],
            [x * ss + y * cc for x, y in zip(X, Y)])
