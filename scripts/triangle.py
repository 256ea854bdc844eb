"""
triangle <x1> <y1> <z1> <x2> <y2> <z2> <x3> <y3> <z3> <height> <block> [state] [mode] [nbt]

Fills the space between the plane through three points and a fixed height,
over the triangle the points span on the x/z plane.

The plane height at each column is usually fractional. It is floored to
the block containing it, which is where Minecraft puts a fractional y.

Bound by the runner: args, command, invoker, console.
"""

import math

MIN_Y, MAX_Y = 0, 255


def clamp(y):
    return math.floor(min(max(y, MIN_Y), MAX_Y))


def cross(x1, y1, x2, y2):
    return x1 * y2 - y1 * x2


def same_side(x1, y1, x2, y2, xa, ya, xb, yb):
    # Points on the line a-b count as being on either side.
    return cross(xb - xa, yb - ya, x1 - xa, y1 - ya) * cross(xb - xa, yb - ya, x2 - xa, y2 - ya) >= 0


def in_triangle(x, y, x1, y1, x2, y2, x3, y3):
    return (
        same_side(x, y, x1, y1, x2, y2, x3, y3)
        and same_side(x, y, x2, y2, x3, y3, x1, y1)
        and same_side(x, y, x3, y3, x1, y1, x2, y2)
    )


def fill(x1, y1, z1, x2, y2, z2, x3, y3, z3, h, tail):
    # Plane a*x + b*y + c*z = d through the three points.
    a = y1 * (z2 - z3) + y2 * (z3 - z1) + y3 * (z1 - z2)
    b = z1 * (x2 - x3) + z2 * (x3 - x1) + z3 * (x1 - x2)
    c = x1 * (y2 - y3) + x2 * (y3 - y1) + x3 * (y1 - y2)
    d = x1 * (y2 * z3 - y3 * z2) + x2 * (y3 * z1 - y1 * z3) + x3 * (y1 * z2 - y2 * z1)

    if b == 0:
        invoker.print_error("triangle: the three points must not lie in a vertical plane")
        return

    for mz in range(min(z1, z2, z3), max(z1, z2, z3) + 1):
        for mx in range(min(x1, x2, x3), max(x1, x2, x3) + 1):
            if in_triangle(mx, mz, x1, z1, x2, z2, x3, z3):
                top = clamp((d - a * mx - c * mz) / b)
                console.execute(f"fill {mx} {h} {mz} {mx} {top} {mz} {tail}")


if len(args) < 11:
    invoker.print_error(
        "Usage: triangle <x1> <y1> <z1> <x2> <y2> <z2> <x3> <y3> <z3> "
        "<height> <block> [state] [mode] [nbt]"
    )
else:
    points = [int(value) for value in args[:9]]
    fill(*points, clamp(int(args[9])), " ".join(args[10:]))
