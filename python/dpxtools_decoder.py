#!/usr/bin/env python3

"""dpxtools_decoder.py module description.

DPX pixel decoder: reads single components from the image data, and
scales them down to 8 bits.

Supported formats:
* 8-bit, any descriptor
* 16-bit, any descriptor
* 10-bit RGB (descriptor 50), one pixel per 32-bit word
* 10-bit RGBA (descriptor 51), 3 components per 32-bit word
* 12-bit, any descriptor, one component per 16-bit word

Notes:
* all the multi-byte reads use the file endianness
* all the scale-downs truncate (no rounding)
* the packing field is not used to select the read function
* the frame read functions (ffun_*) are numpy versions of the component
  read functions, used when the image data is complete
"""


import numpy as np
import sys

import dpxtools_common


def read_uint(buffer, offset, size, header, x, y, c):
    # make sure the read is inside the buffer before doing it
    if offset < 0 or offset + size > len(buffer):
        raise dpxtools_common.PixelReadException(
            x, y, c, header.bit_size, header.description
        )
    return int.from_bytes(
        buffer[offset : offset + size], header.endianness.get_byteorder()
    )


# component read functions
# All of them have the same signature, and return the (8-bit) value of
# component c of pixel (x, y).


# 1 byte -> 1 component
def rfun_8(buffer, header, x, y, c):
    pixel_offset = header.offset + (y * header.width + x) * header.num_components
    return read_uint(buffer, pixel_offset + c, 1, header, x, y, c)


# 2 bytes -> 1 component
def rfun_16(buffer, header, x, y, c):
    pixel_offset = (
        header.offset + (y * header.width + x) * header.num_components * 2
    )
    component = read_uint(buffer, pixel_offset + 2 * c, 2, header, x, y, c)
    return component >> 8


# 4 bytes -> 3 components (1 pixel)
def rfun_10_rgb(buffer, header, x, y, c):
    # 10-bit RGB, filled to 32-bit words, padding last
    # +---+---+---+---+---+---+---+---+ +---+---+---+---+---+---+---+---+
    # |R9 |R8 |R7 |R6 |R5 |R4 |R3 |R2 | |R1 |R0 |G9 |G8 |G7 |G6 |G5 |G4 |
    # +---+---+---+---+---+---+---+---+ +---+---+---+---+---+---+---+---+
    # |G3 |G2 |G1 |G0 |B9 |B8 |B7 |B6 | |B5 |B4 |B3 |B2 |B1 |B0 | 0 | 0 |
    # +---+---+---+---+---+---+---+---+ +---+---+---+---+---+---+---+---+
    # (big-endian byte order shown)
    pixel_offset = header.offset + (y * header.width + x) * 4
    pixel = read_uint(buffer, pixel_offset, 4, header, x, y, c)
    # keep the 8 MSBs of the 10-bit component
    return (pixel >> ((2 - c) * 10 + 4)) & 0xFF


# 4 bytes -> 3 components (crossing pixel boundaries)
def rfun_10_rgba(buffer, header, x, y, c):
    # 10-bit RGBA: same word layout as RGB, but the 4 components of a
    # pixel are spread over the 3-component words. For example:
    #   word 0: R0 G0 B0
    #   word 1: A0 R1 G1
    #   word 2: B1 A1 R2
    #   ...
    component_base_index = (y * header.width + x) * 4
    source_index = (component_base_index + c) // 3
    shift = 24 - ((component_base_index + c) % 3) * 10
    pixel = read_uint(buffer, header.offset + source_index * 4, 4, header, x, y, c)
    return (pixel >> shift) & 0xFF


# 2 bytes -> 1 component
def rfun_12(buffer, header, x, y, c):
    # 12-bit components are stored in 16-bit containers, always assuming
    # 3 components per pixel
    source_index = (y * header.width + x) * 3 + c
    component = read_uint(buffer, header.offset + source_index * 2, 2, header, x, y, c)
    return (component >> 8) & 0xFF


# size functions: number of bytes of image data required by the layout


def sfun_8(header):
    return header.width * header.height * header.num_components


def sfun_16(header):
    return header.width * header.height * header.num_components * 2


def sfun_10_rgb(header):
    return header.width * header.height * 4


def sfun_10_rgba(header):
    # round up to full 32-bit words
    num_words = (header.width * header.height * 4 + 2) // 3
    return num_words * 4


def sfun_12(header):
    return header.width * header.height * 3 * 2


# frame read functions
# Same results as the component read functions, for the whole frame at
# once. They return the (height, width, 3) uint8 array of components 0-2,
# or None when the layout has no frame read. The caller must make sure the
# image data is complete.


def get_frame_data(buffer, header, element, size):
    # element: numpy type string without byte order (e.g. "u2")
    dtype = np.dtype(("<" if header.little_endian else ">") + element)
    data = buffer[header.offset : header.offset + size]
    return np.frombuffer(data, dtype=dtype)


def ffun_8(buffer, header):
    if header.num_components < 3:
        # components 1-2 overlap the next pixels
        return None
    data = get_frame_data(buffer, header, "u1", sfun_8(header))
    data = data.reshape((header.height, header.width, header.num_components))
    return data[:, :, 0:3]


def ffun_16(buffer, header):
    if header.num_components < 3:
        return None
    data = get_frame_data(buffer, header, "u2", sfun_16(header))
    data = data.reshape((header.height, header.width, header.num_components))
    return (data[:, :, 0:3] >> 8).astype(np.uint8)


def ffun_10_rgb(buffer, header):
    data = get_frame_data(buffer, header, "u4", sfun_10_rgb(header))
    data = data.reshape((header.height, header.width))
    return np.stack(
        [(data >> ((2 - c) * 10 + 4)) & 0xFF for c in range(3)], axis=-1
    ).astype(np.uint8)


def ffun_12(buffer, header):
    data = get_frame_data(buffer, header, "u2", sfun_12(header))
    data = data.reshape((header.height, header.width, 3))
    return (data >> 8).astype(np.uint8)


# (bit_size, description) -> functions
# A description of None matches any descriptor.
PIXEL_FORMATS = {
    (8, None): {
        "rfun": rfun_8,
        "sfun": sfun_8,
        "ffun": ffun_8,
    },
    (16, None): {
        "rfun": rfun_16,
        "sfun": sfun_16,
        "ffun": ffun_16,
    },
    (10, 50): {
        "rfun": rfun_10_rgb,
        "sfun": sfun_10_rgb,
        "ffun": ffun_10_rgb,
    },
    (10, 51): {
        "rfun": rfun_10_rgba,
        "sfun": sfun_10_rgba,
        "ffun": None,
    },
    (12, None): {
        "rfun": rfun_12,
        "sfun": sfun_12,
        "ffun": ffun_12,
    },
}


def get_pixel_format(header):
    for key in ((header.bit_size, header.description), (header.bit_size, None)):
        if key in PIXEL_FORMATS:
            return PIXEL_FORMATS[key]
    raise dpxtools_common.UnsupportedFormatException(
        header.bit_size, header.component_type, header.packing
    )


def get_rfun(header):
    return get_pixel_format(header)["rfun"]


def get_ffun(header):
    return get_pixel_format(header)["ffun"]


def get_expected_data_size(header):
    return get_pixel_format(header)["sfun"](header)


def get_available_data_size(header, buffer):
    return max(len(buffer) - header.offset, 0)


def check_data_size(header, buffer, logfd=sys.stdout, debug=0):
    expected_size = get_expected_data_size(header)
    available_size = get_available_data_size(header, buffer)
    if debug > 0:
        print(
            f"debug: image data size: {expected_size=} {available_size=}",
            file=logfd,
        )
    if available_size < expected_size:
        raise dpxtools_common.TruncatedDataException(expected_size, available_size)


def read_component(buffer, header, x, y, c):
    """Read a component from the image data.

    Args:
        buffer: bytes-like object containing the full DPX file
        header: DPXHeader record for the buffer
        x, y: pixel coordinates
        c: component index (0-based)

    Returns:
        int - the component value, scaled to 8 bits

    Raises:
        UnsupportedFormatException: no read function for the bit size and
            descriptor
        PixelReadException: invalid coordinates, or read beyond the end of
            the buffer
    """
    rfun = get_rfun(header)
    # channels 0-2 are always valid (the raster builder reads them for all
    # the layouts)
    max_components = max(header.num_components, 3)
    if not (0 <= x < header.width and 0 <= y < header.height):
        raise dpxtools_common.PixelReadException(
            x, y, c, header.bit_size, header.description
        )
    if not (0 <= c < max_components):
        raise dpxtools_common.PixelReadException(
            x, y, c, header.bit_size, header.description
        )
    return rfun(buffer, header, x, y, c)
