"""Numerical constants shared by the root finder.

Values follow the double-precision conventions of the classic SSJ /
Brent–Dekker implementations.
"""

import sys

# Unit roundoff, 2**-53
MACH_EPS = 1.11022302462515654042e-16

# 2**-52, the reciprocal of 2**52
BIG_INV = 2.22044604925031308085e-16

# Function values with magnitude at or below this count as exact zeros.
MIN_VAL = 2.0 * sys.float_info.min

# Smallest tolerance accepted by find_root; smaller requests are raised to it.
MIN_TOL = 45.0 * MACH_EPS + BIG_INV

MAX_ITER = 150
