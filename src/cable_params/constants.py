"""Physical constants and library-wide defaults."""

# Base power system frequency [Hz]
F0 = 50.0

# Electric constant (vacuum permittivity) [F/m]
EPS0 = 8.8541878128e-12

# Base temperature for conductor properties [°C]
T0 = 20.0

# Geometric tolerance used to detect collapsed (zero-thickness) layers [m]
TOL = 1e-6
