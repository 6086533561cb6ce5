"""Physical formulas for cable parts.

All functions take normalized numbers of a single representation (plain
``float`` or ``UFloat``) and use ``uncertainties.umath`` so that uncertainty
propagates through every derived quantity. None of them accept proxies.
"""

import math
import sys

from uncertainties import nominal_value, umath

from cable_params.constants import EPS0, T0, TOL

_EPS = sys.float_info.epsilon


def temperature_correction(alpha, temperature, t0=T0):
    """Linear resistance correction factor ``1 + alpha (T - T0)``."""
    return 1 + alpha * (temperature - t0)


def tubular_resistance(radius_in, radius_ext, rho, alpha, t0, temperature):
    """DC resistance per unit length of a tubular conductor [Ω/m].

    Parameters
    ----------
    radius_in, radius_ext : Scalar
        Inner and outer radius [m].
    rho : Scalar
        Resistivity at ``t0`` [Ω·m].
    alpha : Scalar
        Temperature coefficient [1/°C].
    t0, temperature : Scalar
        Reference and operating temperature [°C].

    Returns
    -------
    Scalar
        Resistance [Ω/m].
    """
    cross_section = math.pi * (radius_ext**2 - radius_in**2)
    return temperature_correction(alpha, temperature, t0) * rho / cross_section


def strip_resistance(thickness, width, rho, alpha, t0, temperature):
    """DC resistance per unit length of a rectangular strip [Ω/m]."""
    cross_section = thickness * width
    return temperature_correction(alpha, temperature, t0) * rho / cross_section


def helical_params(radius_in, radius_ext, lay_ratio):
    """Mean diameter, pitch length and overlength factor of a helical layer.

    A zero pitch (straight conductor) gives an overlength of exactly 1.
    """
    mean_diameter = 2 * (radius_in + (radius_ext - radius_in) / 2)
    pitch_length = lay_ratio * mean_diameter
    if nominal_value(pitch_length) != 0:
        overlength = umath.sqrt(1 + (math.pi * mean_diameter / pitch_length) ** 2)
    else:
        overlength = 1.0
    return mean_diameter, pitch_length, overlength


def _tubular_terms(radius_ext, radius_in):
    area_diff = radius_ext**2 - radius_in**2
    if nominal_value(radius_in) == 0:
        term1 = 0.0
    else:
        term1 = (radius_in**4 / area_diff**2) * umath.log(radius_ext / radius_in)
    term2 = (3 * radius_in**2 - radius_ext**2) / (4 * area_diff)
    return term1, term2


def tubular_gmr(radius_ext, radius_in, mu_r):
    """Geometric mean radius of a tubular conductor [m].

    A tube of vanishing thickness collapses to its outer radius; a tube whose
    inner radius is negligible against a non-zero outer one diverges to infinity.
    """
    rin, rex = nominal_value(radius_in), nominal_value(radius_ext)
    if rex < rin:
        raise ValueError("radius_ext must be >= radius_in")

    if abs(rex - rin) < TOL:
        return radius_ext
    if abs(rin / rex) < _EPS and abs(rin) > TOL:
        return math.inf

    term1, term2 = _tubular_terms(radius_ext, radius_in)
    return umath.exp(umath.log(radius_ext) - mu_r * (term1 - term2))


def equivalent_mu(gmr, radius_ext, radius_in):
    """Relative permeability that reproduces ``gmr`` for a tube of the given radii."""
    if nominal_value(radius_ext) < nominal_value(radius_in):
        raise ValueError("radius_ext must be >= radius_in")
    term1, term2 = _tubular_terms(radius_ext, radius_in)
    log_diff = umath.log(gmr) - umath.log(radius_ext)
    return -log_diff / (term1 - term2)


def wirearray_gmr(lay_radius, num_wires, radius_wire, mu_r):
    """Geometric mean radius of ``num_wires`` round wires on a circle [m]."""
    gmr_wire = radius_wire * umath.exp(-mu_r / 4)
    log_gmr_array = umath.log(gmr_wire * num_wires * lay_radius ** (num_wires - 1)) / num_wires
    return umath.exp(log_gmr_array)


def wirearray_coords(num_wires, radius_wire, radius_in, center=(0.0, 0.0)):
    """Centre coordinates of every wire of a wire array."""
    lay_radius = 0.0 if num_wires == 1 else radius_in + radius_wire
    angle_step = 2 * math.pi / num_wires
    x0, y0 = center
    coords = []
    for i in range(num_wires):
        angle = i * angle_step
        coords.append((x0 + lay_radius * math.cos(angle), y0 + lay_radius * math.sin(angle)))
    return coords


def gmd(geometry1, geometry2):
    """Area-weighted geometric mean distance between two conductor geometries.

    Each geometry is ``(coords, radius, area)``: the centres of its
    sub-conductors, their radius (outer radius for a concentric part) and the
    area of one sub-conductor. Coincident centres (concentric parts) use the
    larger of the two radii.
    """
    coords1, r1, s1 = geometry1
    coords2, r2, s2 = geometry2

    log_sum = 0.0
    area_weights = 0.0
    for x1, y1 in coords1:
        for x2, y2 in coords2:
            d2 = (x1 - x2) ** 2 + (y1 - y2) ** 2
            if nominal_value(d2) > _EPS**2:
                log_dij = umath.log(d2) / 2
            else:
                log_dij = umath.log(max(r1, r2, key=nominal_value))
            log_sum += (s1 * s2) * log_dij
            area_weights += s1 * s2
    return umath.exp(log_sum / area_weights)


def equivalent_gmr(gmr1, area1, gmr2, area2, gmd12):
    """GMR of two conductors in parallel, weighted by cross-section."""
    beta = area1 / (area1 + area2)
    return gmr1 ** (beta**2) * gmr2 ** ((1 - beta) ** 2) * gmd12 ** (2 * beta * (1 - beta))


def parallel_equivalent(z1, z2):
    return 1 / (1 / z1 + 1 / z2)


def equivalent_alpha(alpha1, r1, alpha2, r2):
    """Temperature coefficient of two resistances in parallel."""
    return (alpha1 * r2 + alpha2 * r1) / (r1 + r2)


def series_admittance(g1, b1, g2, b2):
    """Combine two admittances ``g + jb`` in series, returning ``(g, b)``.

    Works on real and imaginary parts separately so that uncertain numbers
    can flow through.
    """
    m1 = g1**2 + b1**2
    m2 = g2**2 + b2**2
    r = g1 / m1 + g2 / m2
    x = -b1 / m1 - b2 / m2
    m = r**2 + x**2
    return r / m, -x / m


def shunt_capacitance(radius_in, radius_ext, eps_r):
    """Coaxial shunt capacitance per unit length [F/m]."""
    return 2 * math.pi * EPS0 * eps_r / umath.log(radius_ext / radius_in)


def shunt_conductance(radius_in, radius_ext, rho):
    """Coaxial shunt conductance per unit length [S/m]."""
    return 2 * math.pi * (1 / rho) / umath.log(radius_ext / radius_in)


def equivalent_rho(resistance, radius_ext, radius_in):
    return resistance * math.pi * (radius_ext**2 - radius_in**2)


def equivalent_eps(capacitance, radius_ext, radius_in):
    return (capacitance * umath.log(radius_ext / radius_in)) / (2 * math.pi) / EPS0


def sigma_lossfact(conductance, radius_in, radius_ext):
    return conductance * umath.log(radius_ext / radius_in) / (2 * math.pi)


def solenoid_correction(num_turns, radius_ext_con, radius_ext_ins):
    """Permeability correction of an insulation wrapped around a helical conductor.

    A ``NaN`` number of turns denotes a straight conductor and yields 1.
    """
    if math.isnan(nominal_value(num_turns)):
        return 1.0
    return 1.0 + (
        2 * num_turns**2 * math.pi**2 * (radius_ext_ins**2 - radius_ext_con**2)
        / umath.log(radius_ext_ins / radius_ext_con)
    )