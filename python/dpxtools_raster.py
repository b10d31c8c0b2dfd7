#!/usr/bin/env python3

"""dpxtools_raster.py module description.

DPX raster builder: converts the image data of a DPX file into an RGBA8
raster, and keeps the decoding state of a DPX image.
"""


import numpy as np
import sys

import dpxtools_common
import dpxtools_decoder
import dpxtools_header
import dpxtools_io


ALPHA_OPAQUE = 255


class DecodedRaster:
    """Row-major RGBA8 raster.

    The rgba array has (height, width, 4) shape, uint8 dtype, and is
    read-only.
    """

    def __init__(self, rgba):
        height, width, num_channels = rgba.shape
        assert num_channels == 4, f"error: invalid number of channels: {num_channels}"
        self.height = height
        self.width = width
        self.rgba = rgba

    def __str__(self):
        return f"height: {self.height} width: {self.width}"

    def tobytes(self):
        return self.rgba.tobytes()

    @classmethod
    def FromBuffer(cls, data, width, height):
        rgba = np.frombuffer(bytes(data), dtype=np.uint8).reshape((height, width, 4))
        return cls(rgba)


def decode(buffer, header, config=None, logfd=sys.stdout, debug=0):
    """Decode the image data of a DPX file.

    Components 0, 1, and 2 of every pixel are stored as R, G, and B.
    Alpha is always opaque: a 4th component is never read.

    Args:
        buffer: bytes-like object containing the full DPX file
        header: DPXHeader record for the buffer
        config: dpxtools_common.Config object
        logfd: file descriptor for log messages
        debug: verbosity level

    Returns:
        DecodedRaster - the RGBA8 raster
    """
    config = config if config is not None else dpxtools_common.Config()
    # select the read functions once
    rfun = dpxtools_decoder.get_rfun(header)
    ffun = dpxtools_decoder.get_ffun(header)
    if config.get("check_data_size"):
        dpxtools_decoder.check_data_size(header, buffer, logfd, debug)
    width, height = header.width, header.height
    expected_size = dpxtools_decoder.get_expected_data_size(header)
    available_size = dpxtools_decoder.get_available_data_size(header, buffer)
    rgb = None
    if ffun is not None and 0 < expected_size <= available_size:
        rgb = ffun(buffer, header)
    if rgb is not None:
        rgba = np.empty((height, width, 4), dtype=np.uint8)
        rgba[:, :, 0:3] = rgb
        rgba[:, :, 3] = ALPHA_OPAQUE
        rgba.flags.writeable = False
        if debug > 0:
            print(f"debug: decoded {width}x{height} raster (frame)", file=logfd)
        return DecodedRaster(rgba)
    # the output grows as the reads succeed: the header dimensions are not
    # trusted until the image data backs them
    data = bytearray()
    for y in range(height if width > 0 else 0):
        if debug > 1:
            print(f"debug: {y=}", file=logfd)
        for x in range(width):
            data += bytes(
                (
                    rfun(buffer, header, x, y, 0),
                    rfun(buffer, header, x, y, 1),
                    rfun(buffer, header, x, y, 2),
                    ALPHA_OPAQUE,
                )
            )
    if debug > 0:
        print(f"debug: decoded {width}x{height} raster", file=logfd)
    return DecodedRaster.FromBuffer(data, width, height)


# main class
class DPXImage:
    # We have 2x states:
    # * (1) undecoded: we have the file buffer and the header
    # * (2) decoded: we have the raster (and the header)
    #
    # The transition happens once, in GetRaster(). The file buffer is
    # released after decoding only when the "drop_buffer" config is set.

    def __init__(self, infile, buffer, header, config=None, logfd=sys.stdout, debug=0):
        self.infile = infile
        self.buffer = buffer
        self.header = header
        self.config = config if config is not None else dpxtools_common.Config()
        self.logfd = logfd
        self.debug = debug
        self.raster = None

    def __str__(self):
        return str(self.header)

    def IsDecoded(self):
        return self.raster is not None

    # accessors
    def GetHeader(self):
        return self.header

    def GetBuffer(self):
        return self.buffer

    def GetRaster(self):
        if self.raster is not None:
            return self.raster
        assert self.buffer is not None, "error: invalid undecoded DPXImage"
        self.raster = decode(
            self.buffer, self.header, self.config, self.logfd, self.debug
        )
        if self.config.get("drop_buffer"):
            self.buffer = None
        return self.raster

    def ToFile(self, outfile):
        dpxtools_io.write_raster_file(
            outfile, self.GetRaster(), logfd=self.logfd, debug=self.debug
        )

    # factory methods
    @classmethod
    def FromFile(cls, infile, config=None, logfd=sys.stdout, debug=0):
        buffer = dpxtools_io.read_dpx_file(infile, logfd, debug)
        return cls.FromBuffer(buffer, infile, config, logfd, debug)

    @classmethod
    def FromBuffer(cls, buffer, infile="", config=None, logfd=sys.stdout, debug=0):
        # keep our own immutable copy of the buffer
        buffer = bytes(buffer)
        header = dpxtools_header.parse_header(buffer, logfd, debug)
        return DPXImage(infile, buffer, header, config, logfd, debug)
