"""
ellipsoid <x> <y> <z> <rx> <ry> <rz> <block> [state] [mode] [nbt]

Fills a solid ellipsoid centred on (x, y, z) with radii (rx, ry, rz), one
vertical ``fill`` column per (x, z) position.

Bound by the runner: args, command, invoker, console.
"""

MIN_Y, MAX_Y = 0, 255


def clamp(y):
    return min(max(y, MIN_Y), MAX_Y)


def columns(x, y, z, rx, ry, rz):
    """Yield (x, y_low, z, y_high) for every column inside the ellipsoid."""
    for mz in range(-rz, rz + 1):
        for mx in range(-rx, rx + 1):
            inside = [
                my for my in range(-ry, ry + 1)
                if mx * mx * ry * ry * rz * rz
                + rx * rx * my * my * rz * rz
                + rx * rx * ry * ry * mz * mz
                <= rx * rx * ry * ry * rz * rz
            ]
            if inside:
                yield x + mx, clamp(y + min(inside)), z + mz, clamp(y + max(inside))


if len(args) < 7:
    invoker.print_error(
        "Usage: ellipsoid <x> <y> <z> <rx> <ry> <rz> <block> [state] [mode] [nbt]"
    )
else:
    x, y, z, rx, ry, rz = (int(value) for value in args[:6])
    tail = " ".join(args[6:])
    for cx, low, cz, high in columns(x, y, z, rx, ry, rz):
        console.execute(f"fill {cx} {low} {cz} {cx} {high} {cz} {tail}")
