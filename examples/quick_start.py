"""Quick start example: interpolate tabulated data with both splines."""

import math

from pyknot import KrugerSpline, NaturalCubicSpline

# Tabulate sin(x) on 9 knots over one period
points = [2.0 * math.pi * i / 8 for i in range(9)]
values = [math.sin(x) for x in points]

natural = NaturalCubicSpline(points, values)
kruger = KrugerSpline(points, values)

print(natural)
print()

x = 1.0
print(f"Exact:   {math.sin(x):.10f}")
print(f"Natural: {natural.value(x):.10f}  (error {abs(natural.value(x) - math.sin(x)):.2e})")
print(f"Kruger:  {kruger.value(x):.10f}  (error {abs(kruger.value(x) - math.sin(x)):.2e})")

# Derivatives of the active segment
print(f"\nd/dx exact:   {math.cos(x):.10f}")
print(f"d/dx natural: {natural.value(x, derivative_order=1):.10f}")
print(f"d/dx kruger:  {kruger.value(x, derivative_order=1):.10f}")

# Natural boundary condition: zero curvature at both ends
print(f"\nS''(0)    = {natural.value(points[0], derivative_order=2):.2e}")
print(f"S''(2*pi) = {natural.value(points[-1], derivative_order=2):.2e}")

# Kruger keeps interior extrema flat
print(f"Kruger slope at pi/2: {kruger.value(points[2], derivative_order=1):.2e}")
