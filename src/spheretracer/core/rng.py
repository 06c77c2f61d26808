"""Explicit per-pixel random number streams for Taichi kernels.

The core never touches Taichi's global ``ti.random`` state. Instead every
function that needs randomness takes a stream state (a ``u32``) and returns the
advanced state alongside its result, so the stream is threaded through the call
chain by hand:

    xi, state = next_float(state)

Streams are seeded per pixel from ``(seed, i, j)`` with a Wang hash and
advanced with a 32-bit xorshift generator. Two pixels never share a stream,
which keeps renders reproducible no matter how the kernel schedules pixels.

Example:
    >>> @ti.kernel
    ... def sample(out: ti.template()):
    ...     for i in range(out.shape[0]):
    ...         state = seed_stream(7, i, 0, out.shape[0])
    ...         out[i], state = next_float(state)
"""

import taichi as ti

# 2^-24: maps the top 24 bits of a u32 onto [0, 1)
_INV_2_POW_24 = 1.0 / 16777216.0


@ti.func
def wang_hash(x: ti.u32) -> ti.u32:
    """Scramble a 32-bit integer with Thomas Wang's integer hash.

    Args:
        x: The input value.

    Returns:
        A well-mixed 32-bit value.
    """
    h = (x ^ ti.cast(61, ti.u32)) ^ (x >> ti.cast(16, ti.u32))
    h = h * ti.cast(9, ti.u32)
    h = h ^ (h >> ti.cast(4, ti.u32))
    h = h * ti.cast(668265261, ti.u32)
    h = h ^ (h >> ti.cast(15, ti.u32))
    return h


@ti.func
def seed_stream(seed: ti.u32, pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32) -> ti.u32:
    """Derive the initial stream state for one pixel.

    Args:
        seed: The render-wide seed.
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels, used to linearize the pixel index.

    Returns:
        A non-zero stream state unique to the pixel.
    """
    pixel_index = ti.cast(pixel_j * width + pixel_i, ti.u32)
    state = wang_hash(ti.cast(seed, ti.u32) ^ wang_hash(pixel_index))
    # xorshift is stuck at zero forever
    if state == ti.cast(0, ti.u32):
        state = ti.cast(1, ti.u32)
    return state


@ti.func
def next_u32(state: ti.u32) -> ti.u32:
    """Advance a stream by one xorshift32 step and return the new state."""
    s = state ^ (state << ti.cast(13, ti.u32))
    s = s ^ (s >> ti.cast(17, ti.u32))
    s = s ^ (s << ti.cast(5, ti.u32))
    return s


@ti.func
def next_float(state: ti.u32):
    """Draw a uniform float in [0, 1) from a stream.

    Uses the top 24 bits of the next state so every value is exactly
    representable in float32 and 1.0 can never be produced.

    Args:
        state: The current stream state.

    Returns:
        A tuple (value, new_state).
    """
    new_state = next_u32(state)
    value = ti.cast(new_state >> ti.cast(8, ti.u32), ti.f32) * _INV_2_POW_24
    return value, new_state
